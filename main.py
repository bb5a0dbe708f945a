"""
main.py - aa-refresh 진입점

pyproject.toml의 console script(aa-refresh = "main:main")에서 호출됩니다.
"""

from cli.app import cli


def main() -> None:
    cli(prog_name="aa-refresh")


if __name__ == "__main__":
    main()
