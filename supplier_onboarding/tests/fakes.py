from supplier_onboarding.app.services.llm import LLMResponseMeta, LLMResult


class FakeLLM:
    """Records prompts and returns a fixed reply."""

    def __init__(self, text="Generated reply.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate(self, prompt, **overrides):
        self.calls.append((prompt, overrides))
        if self.error is not None:
            raise self.error
        return LLMResult(text=self.text, meta=LLMResponseMeta(model="fake"))
