import typing as tp

from loguru import logger as _logger

LoguruLogger = type[_logger]

# A millisecond slice or a scheduled arrival: delay/time in seconds, None if lost
SliceValue = tp.Optional[float]
ScheduleSlot = tp.Optional[float]

Payload = tp.Union[bytes, bytearray, memoryview]
