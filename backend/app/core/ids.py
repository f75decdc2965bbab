import uuid


def new_token() -> str:
    """Opaque, collision-resistant identifier for previews and chat sessions."""
    return str(uuid.uuid4()).replace("-", "")
