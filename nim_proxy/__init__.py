"""OpenAI-compatible proxy for NVIDIA NIM chat completions"""

__version__ = "1.0.0"
