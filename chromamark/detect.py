# chromamark/detect.py

def detect_file_type(path):
    """
    Detects the type of an image file from its magic number (signature).
    Reads the first few bytes of the file and compares them to known patterns.
    """
    with open(path, "rb") as f:        # Open file in binary mode
        sig = f.read(12)               # WebP needs bytes 8..11

    # PNG files start with 89 50 4E 47 ("89PNG")
    if sig.startswith(b"\x89PNG"):
        return "png"

    # JPEG files start with FF D8
    elif sig.startswith(b"\xFF\xD8"):
        return "jpeg"

    # BMP files start with "BM"
    elif sig.startswith(b"BM"):
        return "bmp"

    # TIFF, either byte order
    elif sig.startswith(b"II*\x00") or sig.startswith(b"MM\x00*"):
        return "tiff"

    # GIF87a / GIF89a
    elif sig.startswith(b"GIF8"):
        return "gif"

    # RIFF container with a WEBP form type
    elif sig[:4] == b"RIFF" and sig[8:12] == b"WEBP":
        return "webp"

    # If none match, return unknown
    else:
        return "unknown"


def is_lossy(file_type):
    """
    True for formats whose encoder already degrades the watermark.
    GIF is included for its 256-colour palette.
    """
    return file_type in ("jpeg", "gif")
