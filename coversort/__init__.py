"""coversort - sort note cover images into vault folders by source domain."""

__version__ = "0.1.0"
