"""Caller model name to NIM model id lookup"""
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple, Union


class ModelMapper:
    """Resolves OpenAI-style model names to upstream NIM model ids

    Unknown names are not an error: they resolve to the fallback model.
    The table is copied into a read-only view, so a mapper can be shared by
    concurrent requests.
    """

    def __init__(
        self,
        mapping: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
        fallback_model: str,
    ):
        if not fallback_model:
            raise ValueError("fallback_model must not be empty")
        self._mapping = MappingProxyType(dict(mapping))
        self._fallback_model = fallback_model

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    @property
    def fallback_model(self) -> str:
        return self._fallback_model

    def resolve(self, model: Optional[str]) -> str:
        """Return the upstream id for ``model`` or the fallback model"""
        if not isinstance(model, str):
            return self._fallback_model
        return self._mapping.get(model) or self._fallback_model

    def model_names(self) -> List[str]:
        """Caller-facing model names in table order"""
        return list(self._mapping.keys())

    def __contains__(self, model: object) -> bool:
        return model in self._mapping
