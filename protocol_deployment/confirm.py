from ape.utils import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected in transaction arguments; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _print_transaction(message: str, arguments: dict) -> None:
    if arguments:
        pretty_args = "\n\t".join(f"{name}={value}" for name, value in arguments.items())
        print(f"{message} with arguments:\n\t{pretty_args}")
    else:
        print(f"{message} with no arguments")


def _confirm_transaction(arguments: dict) -> None:
    """Asks the user to confirm a pending transaction."""
    _continue()
    if any(value == ZERO_ADDRESS for value in arguments.values()):
        _confirm_zero_address()
