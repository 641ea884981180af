from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from shareit.db.models import Comment, User


def has_commented(db: Session, item_id: int, author_id: int) -> bool:
    query = select(Comment.id).where(Comment.item_id == item_id, Comment.author_id == author_id)
    return db.scalar(query.limit(1)) is not None


def list_item_comments(db: Session, item_ids: Sequence[int]) -> Sequence[tuple[Comment, str]]:
    """Comments of the given items with their author names, oldest first."""
    if not item_ids:
        return []
    return db.execute(
        select(Comment, User.name)
        .join(User, Comment.author_id == User.id)
        .where(Comment.item_id.in_(item_ids))
        .order_by(Comment.created, Comment.id)
    ).all()
