from .prompt import build_prompt
from .stream import StreamFolder, fold_stream, extract_content
from .providers import TextProvider, ChatCompletionsProvider, GeminiProvider, create_provider
from .orchestrator import EnrichmentOrchestrator, EnrichmentResult

__all__ = [
    "build_prompt", "StreamFolder", "fold_stream", "extract_content",
    "TextProvider", "ChatCompletionsProvider", "GeminiProvider", "create_provider",
    "EnrichmentOrchestrator", "EnrichmentResult"
]
