# frameline/models/orm/video.py
from sqlalchemy import BigInteger, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from frameline.models.orm.base import Base


class Video(Base):
    __tablename__ = "videos"

    # epoch milliseconds at creation
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    title: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str] = mapped_column(String(255))
    file_id: Mapped[str] = mapped_column(Text)
    file_size: Mapped[int] = mapped_column(BigInteger)
    file_type: Mapped[str] = mapped_column(String(100))

    src_x_resolution: Mapped[int] = mapped_column(Integer)
    src_y_resolution: Mapped[int] = mapped_column(Integer)
    output_x_resolution: Mapped[int] = mapped_column(Integer)
    output_y_resolution: Mapped[int] = mapped_column(Integer)
    src_fps: Mapped[float] = mapped_column(Float)
    output_fps: Mapped[float] = mapped_column(Float)

    frame_no: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)

    upload_time: Mapped[int] = mapped_column(BigInteger, index=True)
