from typing import Union
from urllib.parse import urlsplit


class ImageURL:
    """
    Type-safe wrapper for image URLs collected from Discord messages.

    Discord CDN links carry expiring signature parameters (``?ex=...&is=...&hm=...``)
    that change every time a message is fetched. :meth:`normalized` strips the
    query string and fragment so the same underlying image always maps to the
    same identity.

    Example:
        >>> url = ImageURL("https://cdn.discordapp.com/a/1/scam.png?ex=1&hm=2")
        >>> url.normalized()
        'https://cdn.discordapp.com/a/1/scam.png'
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, "ImageURL"]) -> None:
        """
        Initialize an ImageURL from a string or another ImageURL.

        Raises:
            ValueError: If the value is empty or not a string.
        """
        if isinstance(value, ImageURL):
            self._value = value._value
        elif isinstance(value, str):
            url = value.strip()
            if not url:
                raise ValueError("ImageURL cannot be empty")
            self._value = url
        else:
            raise ValueError(f"Cannot create ImageURL from {type(value).__name__}: {value}")

    def normalized(self) -> str:
        """Return the URL without its query string or fragment."""
        return self._value.split("?", 1)[0].split("#", 1)[0]

    @property
    def path(self) -> str:
        """Return the URL path component, or an empty string if it cannot be parsed."""
        try:
            return urlsplit(self._value).path
        except ValueError:
            return ""

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"ImageURL({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ImageURL):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
