"""FFMPEG command construction and execution modules."""

from .command_builder import CommandBuilder, Filter, FilterChain, FFMPEGCommand
from .process_manager import CANCEL_EXIT_CODE, ProcessManager, ProcessResult, ProgressInfo

__all__ = [
    "CommandBuilder",
    "Filter",
    "FilterChain",
    "FFMPEGCommand",
    "CANCEL_EXIT_CODE",
    "ProcessManager",
    "ProcessResult",
    "ProgressInfo",
]
