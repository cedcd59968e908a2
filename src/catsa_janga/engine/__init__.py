"""Engine: shutdown handling and the composed progress saver.

- ProgressSaver: CheckpointStore + ShutdownCoordinator, with construct-and-restore
- ShutdownCoordinator: one save-then-exit on SIGINT/SIGTERM/crash
- SignalSource / ProcessSignalSource: injectable process-event registry

Example:
    from catsa_janga.engine import ProgressSaver

    async def main() -> None:
        saver, restored = await ProgressSaver.create(lambda: state, path="progress.json")
"""

from catsa_janga.engine.progress import ProgressSaver
from catsa_janga.engine.shutdown import EXIT_CRASH, EXIT_SIGNAL, ShutdownCoordinator, SupportsSave
from catsa_janga.engine.signals import ProcessSignalSource, SignalSource, get_process_signal_source

__all__ = [
    "EXIT_CRASH",
    "EXIT_SIGNAL",
    "ProcessSignalSource",
    "ProgressSaver",
    "ShutdownCoordinator",
    "SignalSource",
    "SupportsSave",
    "get_process_signal_source",
]
