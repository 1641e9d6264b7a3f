from babel import Locale, UnknownLocaleError

from optbind.exceptions import SetupError

DEFAULT_LOCALE = "en_US"


def resolve_locale(locale: "Locale | str | None" = None) -> Locale:
    """Resolve a locale identifier into a :class:`babel.Locale`.

    Parameters
    ----------
    locale: babel.Locale | str | None
        A :class:`~babel.Locale`, an identifier such as ``"de_DE"`` or ``"de-DE"``,
        or :obj:`None` for :data:`DEFAULT_LOCALE`.

    Raises
    ------
    SetupError
        ``locale`` is not a known locale identifier.
    """
    if isinstance(locale, Locale):
        return locale
    if locale is None:
        locale = DEFAULT_LOCALE
    try:
        return Locale.parse(locale.replace("-", "_"))
    except (UnknownLocaleError, ValueError, TypeError) as e:
        raise SetupError(f"Unknown locale {locale!r}.") from e
