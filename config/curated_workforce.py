"""
Curated Eurostat workforce values (2022/2023 releases), per 100k inhabitants.

Served by the read path when the store is empty, whether or not the live
API is reachable.
"""
from __future__ import annotations

CURATED_YEAR = 2023
CURATED_SYNCED_AT = "2024-01-15T00:00:00Z"

# code, total, under 35, 35-54, 55+, graduates
CURATED_WORKFORCE: list[tuple[str, int, int, int, int, int]] = [
    ("AT", 528, 68, 241, 219, 27),
    ("BE", 319, 52, 158, 109, 18),
    ("BG", 422, 48, 168, 206, 21),
    ("HR", 301, 41, 132, 128, 14),
    ("CY", 362, 44, 159, 159, 9),
    ("CZ", 421, 58, 178, 185, 22),
    ("DK", 420, 72, 211, 137, 19),
    ("EE", 347, 39, 138, 170, 12),
    ("FI", 327, 48, 155, 124, 17),
    ("FR", 321, 44, 148, 129, 20),
    ("DE", 448, 71, 201, 176, 24),
    ("GR", 622, 58, 241, 323, 16),
    ("HU", 338, 39, 141, 158, 15),
    ("IS", 404, 66, 202, 136, 14),
    ("IE", 328, 62, 168, 98, 22),
    ("IT", 413, 38, 158, 217, 18),
    ("LV", 321, 36, 128, 157, 11),
    ("LT", 478, 58, 191, 229, 19),
    ("LU", 298, 44, 148, 106, 8),
    ("MT", 389, 58, 178, 153, 11),
    ("NL", 369, 66, 188, 115, 18),
    ("NO", 491, 88, 241, 162, 21),
    ("PL", 248, 38, 108, 102, 14),
    ("PT", 531, 71, 231, 229, 19),
    ("RO", 298, 42, 121, 135, 18),
    ("SK", 348, 41, 144, 163, 13),
    ("SI", 317, 48, 142, 127, 12),
    ("ES", 415, 54, 188, 173, 22),
    ("SE", 428, 78, 218, 132, 19),
    ("CH", 439, 62, 208, 169, 16),
    ("TR", 192, 48, 98, 46, 28),
]
