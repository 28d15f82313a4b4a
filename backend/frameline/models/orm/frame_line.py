# frameline/models/orm/frame_line.py
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from frameline.models.orm.base import Base, IntegerMixin

PLACEHOLDER_FRAME_NUMBER = -1
PLACEHOLDER_CONTENT = " "


class FrameLine(Base, IntegerMixin):
    __tablename__ = "frame_lines"

    # not unique at the schema level; resets keep line numbers distinct
    line_number: Mapped[int] = mapped_column(Integer, index=True)
    frame_number: Mapped[int] = mapped_column(Integer, default=PLACEHOLDER_FRAME_NUMBER)
    line_content: Mapped[str] = mapped_column(Text, default=PLACEHOLDER_CONTENT)
