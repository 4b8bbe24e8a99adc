"""forexa core package."""
