"""SOS share link carrying the user's live position."""

from urllib.parse import quote

from daytrip.app.models.common import Coordinates

SOS_WITH_LOCATION = "¡SOS! Necesito ayuda en {city}. Mi ubicación actual es: {maps_url}"
SOS_WITHOUT_LOCATION = "¡SOS! Necesito ayuda en {city}. No puedo obtener mi ubicación GPS."


def maps_link(coords: Coordinates) -> str:
    """Google Maps link for a coordinate pair."""
    return f"https://maps.google.com/?q={coords.lat},{coords.lng}"


def build_sos_message(location: Coordinates | None, city: str = "Florencia") -> str:
    """Help message, with a maps link when a position is known."""
    if location is None:
        return SOS_WITHOUT_LOCATION.format(city=city)
    return SOS_WITH_LOCATION.format(city=city, maps_url=maps_link(location))


def build_sos_link(
    location: Coordinates | None,
    base_url: str = "https://wa.me/",
    city: str = "Florencia",
) -> str:
    """Share URL with the SOS message prefilled."""
    return f"{base_url}?text={quote(build_sos_message(location, city), safe='')}"
