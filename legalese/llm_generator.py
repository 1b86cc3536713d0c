import logging
import threading

from legalese.config import get_settings

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class LLMGenerator:
    def __init__(self, model_name: str):
        self.model_name = model_name
        self.model = None
        self.tokenizer = None
        self.device = "cpu"
        self._load_lock = threading.Lock()

    def load_model(self):
        try:
            logger.info("Loading generation model %s...", self.model_name)

            import torch
            from transformers import AutoTokenizer, AutoModelForSeq2SeqLM

            device = "cuda" if torch.cuda.is_available() else "cpu"

            tokenizer = AutoTokenizer.from_pretrained(self.model_name, use_fast=True)

            model = AutoModelForSeq2SeqLM.from_pretrained(
                self.model_name,
                torch_dtype=torch.float16 if device == "cuda" else torch.float32,
                low_cpu_mem_usage=True
            )
            model.to(device)
            model.eval()

            self.device, self.tokenizer, self.model = device, tokenizer, model
            logger.info("Generation model %s loaded on %s", self.model_name, self.device)
            return True
        except Exception as e:
            logger.error("Failed to load generation model %s: %s", self.model_name, e)
            return False

    def _ensure_loaded(self):
        if self.model is not None:
            return
        with self._load_lock:
            if self.model is None and not self.load_model():
                raise GenerationError(503, f"Generation model {self.model_name} is unavailable")

    def generate(self, prompt: str, temperature: float = 0.3, max_output_tokens: int = 2048) -> str:
        self._ensure_loaded()

        options = {"max_new_tokens": max_output_tokens}
        if temperature > 0:
            options.update(do_sample=True, temperature=temperature, top_k=40, top_p=0.8)
        else:
            options["do_sample"] = False

        try:
            encoded = self.tokenizer(prompt, return_tensors="pt", truncation=True)
            inputs = {name: tensor.to(self.device) for name, tensor in encoded.items()}
            output_ids = self.model.generate(**inputs, **options)
            text = self.tokenizer.decode(output_ids[0], skip_special_tokens=True)
        except Exception as e:
            logger.error("Generation failed: %s", e)
            raise GenerationError(502, f"Generation failed: {e}") from e

        if not text or not text.strip():
            raise GenerationError(502, "Invalid response from generation service")
        return text.strip()


_llm_generator = None

def get_llm_generator() -> LLMGenerator:
    global _llm_generator
    if _llm_generator is None:
        _llm_generator = LLMGenerator(get_settings().generation_model)
    return _llm_generator
