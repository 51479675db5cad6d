"""Approximate geographic centres of countries, keyed by country name.

Used when a humanitarian-disaster record names an affected country but
carries no coordinates of its own. Alerts positioned this way sit at the
country centre, not at the event; that coarseness is accepted.

ReliefWeb spells several countries with their UN names, so those spellings
are listed as aliases of the common name.
"""

from __future__ import annotations

# Country name -> (latitude, longitude)
COUNTRY_CENTROIDS: dict[str, tuple[float, float]] = {
    # Asia
    "Philippines": (12.8797, 121.7740),
    "India": (20.5937, 78.9629),
    "China": (35.8617, 104.1954),
    "Japan": (36.2048, 138.2529),
    "Indonesia": (-0.7893, 113.9213),
    "Pakistan": (30.3753, 69.3451),
    "Bangladesh": (23.6850, 90.3563),
    "Nepal": (28.3949, 84.1240),
    "Myanmar": (21.9162, 95.9560),
    "Thailand": (15.8700, 100.9925),
    "Vietnam": (14.0583, 108.2772),
    "Afghanistan": (33.9391, 67.7100),
    "Sri Lanka": (7.8731, 80.7718),
    "Malaysia": (4.2105, 101.9758),
    "South Korea": (35.9078, 127.7669),
    "North Korea": (40.3399, 127.5101),
    "Cambodia": (12.5657, 104.9910),
    "Laos": (19.8563, 102.4955),
    # Middle East
    "Turkey": (38.9637, 35.2433),
    "Iran": (32.4279, 53.6880),
    "Iraq": (33.2232, 43.6793),
    "Syria": (34.8021, 38.9968),
    "Yemen": (15.5527, 48.5164),
    "Saudi Arabia": (23.8859, 45.0792),
    "Lebanon": (33.8547, 35.8623),
    "Jordan": (30.5852, 36.2384),
    "Israel": (31.0461, 34.8516),
    "Palestine": (31.9522, 35.2332),
    # Africa
    "Nigeria": (9.0820, 8.6753),
    "Kenya": (-0.0236, 37.9062),
    "Ethiopia": (9.1450, 40.4897),
    "South Africa": (-30.5595, 22.9375),
    "Egypt": (26.8206, 30.8025),
    "Democratic Republic of the Congo": (-4.0383, 21.7587),
    "Congo": (-0.2280, 15.8277),
    "Somalia": (5.1521, 46.1996),
    "Sudan": (12.8628, 30.2176),
    "South Sudan": (6.8770, 31.3070),
    "Tanzania": (-6.3690, 34.8888),
    "Uganda": (1.3733, 32.2903),
    "Mozambique": (-18.6657, 35.5296),
    "Ghana": (7.9465, -1.0232),
    "Madagascar": (-18.7669, 46.8691),
    "Cameroon": (7.3697, 12.3547),
    "Mali": (17.5707, -3.9962),
    "Niger": (17.6078, 8.0817),
    "Chad": (15.4542, 18.7322),
    "Zimbabwe": (-19.0154, 29.1549),
    "Malawi": (-13.2543, 34.3015),
    "Zambia": (-13.1339, 27.8493),
    # Europe
    "Greece": (39.0742, 21.8243),
    "Italy": (41.8719, 12.5674),
    "Spain": (40.4637, -3.7492),
    "France": (46.6034, 1.8883),
    "Germany": (51.1657, 10.4515),
    "United Kingdom": (55.3781, -3.4360),
    "Poland": (51.9194, 19.1451),
    "Ukraine": (48.3794, 31.1656),
    "Romania": (45.9432, 24.9668),
    "Portugal": (39.3999, -8.2245),
    "Georgia": (42.3154, 43.3569),
    "Albania": (41.1533, 20.1683),
    "Bosnia and Herzegovina": (43.9159, 17.6791),
    "Serbia": (44.0165, 21.0059),
    "Croatia": (45.1000, 15.2000),
    # Americas
    "United States": (37.0902, -95.7129),
    "Mexico": (23.6345, -102.5528),
    "Brazil": (-14.2350, -51.9253),
    "Canada": (56.1304, -106.3468),
    "Peru": (-9.1900, -75.0152),
    "Colombia": (4.5709, -74.2973),
    "Venezuela": (6.4238, -66.5897),
    "Chile": (-35.6751, -71.5430),
    "Ecuador": (-1.8312, -78.1834),
    "Guatemala": (15.7835, -90.2308),
    "Haiti": (18.9712, -72.2852),
    "Honduras": (15.2000, -86.2419),
    "Nicaragua": (12.8654, -85.2072),
    "El Salvador": (13.7942, -88.8965),
    "Costa Rica": (9.7489, -83.7534),
    "Panama": (8.5380, -80.7821),
    "Bolivia": (-16.2902, -63.5887),
    "Paraguay": (-23.4425, -58.4438),
    "Argentina": (-38.4161, -63.6167),
    # Oceania
    "Australia": (-25.2744, 133.7751),
    "Papua New Guinea": (-6.3150, 143.9555),
    "Fiji": (-17.7134, 178.0650),
    "Vanuatu": (-15.3767, 166.9592),
    "Solomon Islands": (-9.6457, 160.1562),
    "New Zealand": (-40.9006, 174.8860),
}

# ReliefWeb / UN spelling -> key in COUNTRY_CENTROIDS
COUNTRY_ALIASES: dict[str, str] = {
    "Lao PDR": "Laos",
    "Lao People's Democratic Republic": "Laos",
    "Viet Nam": "Vietnam",
    "Republic of Korea": "South Korea",
    "Democratic People's Republic of Korea": "North Korea",
    "Türkiye": "Turkey",
    "Iran (Islamic Republic of)": "Iran",
    "Syrian Arab Republic": "Syria",
    "occupied Palestinian territory": "Palestine",
    "United Republic of Tanzania": "Tanzania",
    "Congo, The Democratic Republic of the": "Democratic Republic of the Congo",
    "United States of America": "United States",
    "United Kingdom of Great Britain and Northern Ireland": "United Kingdom",
    "Bolivia (Plurinational State of)": "Bolivia",
    "Venezuela (Bolivarian Republic of)": "Venezuela",
}

_CASEFOLDED: dict[str, tuple[float, float]] = {
    name.casefold(): coords for name, coords in COUNTRY_CENTROIDS.items()
}
_CASEFOLDED.update(
    {alias.casefold(): COUNTRY_CENTROIDS[name] for alias, name in COUNTRY_ALIASES.items()}
)


def country_centroid(name: str | None) -> tuple[float, float] | None:
    """Look up a country centre by name, ignoring case. None when unknown."""
    if not name:
        return None
    return _CASEFOLDED.get(name.strip().casefold())
