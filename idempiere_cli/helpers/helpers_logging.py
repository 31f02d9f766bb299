"""Simple logging helpers for the iDempiere CLI."""


class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


def print_header(msg: str) -> None:
    """Print a header message."""
    print(f"{Colors.HEADER}{Colors.BOLD}{msg}{Colors.ENDC}")


def print_info(msg: str) -> None:
    """Print an info message."""
    print(f"{Colors.OKCYAN}{msg}{Colors.ENDC}")


def print_success(msg: str) -> None:
    """Print a success message."""
    print(f"{Colors.OKGREEN}✓ {msg}{Colors.ENDC}")


def print_warning(msg: str) -> None:
    """Print a warning message."""
    print(f"{Colors.YELLOW}⚠️  {msg}{Colors.ENDC}")


def print_error(msg: str) -> None:
    """Print an error message."""
    print(f"{Colors.RED}❌ {msg}{Colors.ENDC}")


def print_created(label: str) -> None:
    """Report a file written by the scaffolder."""
    print(f"  ✓ Created: {label}")


def print_skipped(label: str) -> None:
    """Report a file left untouched because it already exists."""
    print(f"  ⊘ Skipped (exists): {label}")
