from .models import Query, SizeFilter, SizeSign

SIZE_USAGE_ERROR: str = 'Wrong usage of "size" option'


def parse_size_filter(value: str) -> SizeFilter:
    """
    Parse a size filter such as ``-100``, ``=0`` or ``+4096``.

    The first character selects the comparison (less, equal, greater) and
    the remainder must be a non-negative decimal number of bytes.
    """
    text: str = value.strip()

    if not text:
        raise ValueError(SIZE_USAGE_ERROR)

    try:
        sign: SizeSign = SizeSign(text[0])
    except ValueError:
        raise ValueError(SIZE_USAGE_ERROR)

    number: str = text[1:]
    if not (number.isascii() and number.isdigit()):
        raise ValueError(SIZE_USAGE_ERROR)

    return SizeFilter(sign=sign, size=int(number))


def build_query(
    root_path: str | None,
    *,
    inum: int | None = None,
    name: str | None = None,
    size: str | None = None,
    nlinks: int | None = None,
    exec_path: str | None = None,
) -> Query:
    if not root_path:
        raise ValueError("Missing search path")
    if inum is not None and inum < 0:
        raise ValueError("Inode number must not be negative")
    if nlinks is not None and nlinks < 0:
        raise ValueError("Hard link count must not be negative")
    if exec_path is not None and not exec_path:
        raise ValueError("Missing path to execute")

    return Query(
        root_path=root_path,
        inum=inum,
        name=name,
        size=parse_size_filter(size) if size is not None else None,
        nlinks=nlinks,
        exec_path=exec_path,
    )
