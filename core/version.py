__all__: list[str] = ["VERSION"]

VERSION: str = "1.0.0"
