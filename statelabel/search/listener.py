"""
Search notifications.

Listeners subclass SearchListener and override the notifications they need.
Every notification receives the Search, which answers queries about the
current state (state_id, is_new_state(), is_end_state(), ...).
"""


class SearchListener:
    """No-op adapter for every search notification."""

    def search_started(self, search):
        pass

    def execute_instruction(self, search, instruction):
        """The instruction is about to execute."""

    def instruction_executed(self, search, executed, next_instruction):
        """
        The instruction executed. next_instruction is None when the program
        ended with it.
        """

    def state_advanced(self, search):
        pass

    def state_backtracked(self, search):
        pass

    def state_restored(self, search):
        pass

    def search_constraint_hit(self, search):
        pass

    def search_finished(self, search):
        pass
