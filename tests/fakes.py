import json


class FakeCompletionClient:
    """Replays canned completions in order; exceptions in the queue are raised."""

    model = "fake-model"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete_json(self, messages, *, temperature, max_tokens):
        self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if not self.responses:
            raise AssertionError("Unexpected completion call.")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return item
        return json.dumps(item)
