"""
Wraith — Color Palette
Muted earth tones for the figure against a pale, paper-like ground.
"""

COLORS = {
    "BODY": {
        "MAIN": (55, 45, 40),
        "SHADOW": (40, 35, 30),
        "HIGHLIGHT": (65, 55, 50),
    },
    "HEAD": {
        "MAIN": (235, 225, 205),
        "SHADOW": (215, 205, 185),
        "GLOW": (245, 235, 215),
    },
    "ARMS": {
        "MAIN": (65, 55, 45),
        "SHADOW": (50, 45, 35),
    },
    "BACKGROUND": (220, 215, 205),
    "ATMOSPHERE": (200, 195, 185),
}

BLACK = (0, 0, 0)
