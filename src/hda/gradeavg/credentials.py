import getpass

from hda.gradeavg.error import CredentialsError


def read_credentials(username: str = "", password: str = "") -> tuple[str, str]:
    """Prompts for whichever of username and password is empty.

    The password is read without echo.

    Raises:
        CredentialsError: If the terminal cannot be read.
    """
    try:
        if not username:
            username = input("Please enter your OBS username: ").strip()
        if not password:
            password = getpass.getpass("Please enter your OBS password: ")
    except (EOFError, OSError) as e:
        raise CredentialsError(f"Failed to read credentials: {e!r}") from e

    return username, password
