"""actionscout — discover user actions on websites by crawling and classifying page elements."""

__version__ = "0.1.0"
