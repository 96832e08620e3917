"""Run aws-env as ``python -m aws_env``."""

from .cli import main


if __name__ == "__main__":
    main(prog_name="aws-env")
