from textual.message import Message

class BookmarksChanged(Message):
    """Posted when bookmarks were edited outside the feed view."""
    def __init__(self, removed_url: str) -> None:
        self.removed_url = removed_url
        super().__init__()
