# frameline/models/orm/__init__.py
from .video import Video
from .frame_line import FrameLine
from .base import Base
