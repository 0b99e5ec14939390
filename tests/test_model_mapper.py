"""Tests for model name mapping"""
import pytest

from nim_proxy.models.config import AppConfig, DEFAULT_FALLBACK_MODEL, DEFAULT_MODEL_MAPPING
from nim_proxy.services.model_mapper import ModelMapper


@pytest.fixture
def mapper() -> ModelMapper:
    return ModelMapper(
        {'gpt-4': 'deepseek-ai/deepseek-v3.2', 'gpt-4o': 'moonshotai/kimi-k2.5'},
        'meta/llama-3.1-8b-instruct',
    )


@pytest.mark.unit
class TestModelMapper:
    """Test ModelMapper"""

    def test_known_model(self, mapper):
        assert mapper.resolve('gpt-4') == 'deepseek-ai/deepseek-v3.2'

    def test_unknown_model_falls_back(self, mapper):
        assert mapper.resolve('unknown-model-xyz') == 'meta/llama-3.1-8b-instruct'

    @pytest.mark.parametrize('model', [None, '', 42, ['gpt-4']])
    def test_missing_or_odd_model_falls_back(self, mapper, model):
        assert mapper.resolve(model) == 'meta/llama-3.1-8b-instruct'

    def test_lookup_is_case_sensitive(self, mapper):
        assert mapper.resolve('GPT-4') == 'meta/llama-3.1-8b-instruct'

    def test_model_names_in_table_order(self, mapper):
        assert mapper.model_names() == ['gpt-4', 'gpt-4o']

    def test_contains(self, mapper):
        assert 'gpt-4' in mapper
        assert 'unknown-model-xyz' not in mapper

    def test_mapping_is_read_only(self, mapper):
        with pytest.raises(TypeError):
            mapper.mapping['gpt-4'] = 'other'

    def test_source_table_changes_do_not_leak_in(self):
        table = {'gpt-4': 'a'}
        mapper = ModelMapper(table, 'fallback')
        table['gpt-4'] = 'b'

        assert mapper.resolve('gpt-4') == 'a'

    def test_empty_fallback_rejected(self):
        with pytest.raises(ValueError):
            ModelMapper({}, '')

    def test_empty_table_always_falls_back(self):
        mapper = ModelMapper({}, 'fallback')
        assert mapper.resolve('gpt-4') == 'fallback'
        assert mapper.model_names() == []


@pytest.mark.unit
class TestDefaultTable:
    """Test the built-in mapping"""

    def test_default_config_uses_builtin_table(self):
        config = AppConfig()
        mapper = ModelMapper(config.model_mapping, config.fallback_model)

        assert mapper.model_names() == list(DEFAULT_MODEL_MAPPING)
        assert mapper.resolve('gpt-4o') == 'moonshotai/kimi-k2.5'
        assert mapper.resolve('unknown-model-xyz') == DEFAULT_FALLBACK_MODEL

    def test_fallback_is_not_a_mapped_target(self):
        assert DEFAULT_FALLBACK_MODEL not in DEFAULT_MODEL_MAPPING.values()
