import sys


RED = "\033[31m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
RESET = "\033[0m"


def colored() -> bool:
    return sys.stderr.isatty()


def error(msg: str) -> None:
    if colored():
        print(f"{RED}Error:{RESET} {msg}", file=sys.stderr)
    else:
        print(f"Error: {msg}", file=sys.stderr)
