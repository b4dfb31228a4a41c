import signal


class CtrlCHandler:
    """
    Handle Ctrl+C for a clean shutdown so the session tears down
    its sensor feed and audio handle instead of dying mid-round.
    """
    def __init__(self):
        self.should_stop = False
        self._callbacks = []
        self._prompting = False
        signal.signal(signal.SIGINT, self._signal_handler)

    def on_stop(self, callback):
        """Register a callback run once when Ctrl+C is detected"""
        self._callbacks.append(callback)

    def prompt(self, question, reader=input):
        """Blocking prompt that Ctrl+C interrupts with KeyboardInterrupt"""
        self._prompting = True
        try:
            return reader(question)
        finally:
            self._prompting = False

    def _signal_handler(self, sig, frame):
        """Callback executed when Ctrl+C is detected"""
        print("\n[INFO] Interrupt signal detected, closing cleanly...")
        self.should_stop = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        # input() only returns on Enter; unblock it
        if self._prompting:
            raise KeyboardInterrupt
