from .models import EntryMetadata, Query, SizeFilter, SizeSign


def compare_size(size_filter: SizeFilter, size: int) -> bool:
    if size_filter.sign is SizeSign.LESS:
        return size < size_filter.size
    if size_filter.sign is SizeSign.EQUAL:
        return size == size_filter.size
    return size > size_filter.size


def matches(query: Query, metadata: EntryMetadata) -> bool:
    """
    Decide whether one non-directory entry satisfies every active filter.

    Filters left as None are not checked, so a query without filters
    matches everything. The name filter is compared against the base
    name of the entry only.
    """
    if not query.has_filters:
        return True

    if query.inum is not None and metadata.inode != query.inum:
        return False
    if query.name is not None and metadata.name != query.name:
        return False
    if query.size is not None and not compare_size(query.size, metadata.size):
        return False
    if query.nlinks is not None and metadata.nlinks != query.nlinks:
        return False

    return True
