class Path:
    """URL constants for the OBS portal.

    Contains the default hostname and the endpoint paths, relative to the
    configured base URL, used for login and scraping.
    """

    HOSTNAME = "https://obs.fbi.h-da.de/obs/"
    LOGIN = "login.php?action=login"
    GRADES = "index.php?action=noten"
    STATISTICS = "index.php?action=Notenstatistik&statpar="
