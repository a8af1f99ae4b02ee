from PIL import Image


def image_size(path: str) -> tuple[int, int]:
    """(width, height) in pixels. Pillow only reads the header here."""
    with Image.open(path) as img:
        return img.size
