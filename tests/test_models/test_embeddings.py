"""Tests for the embedding composer."""

from dataclasses import replace

import pytest
import torch
import torch.nn as nn
import torch.nn.functional as F

from distilqa.errors import ConfigError
from distilqa.models.config import DistilBertConfig
from distilqa.models.embeddings import Embeddings
from distilqa.models.positional_encoding import create_sinusoidal_embeddings
from distilqa.utils.random import set_seed


@pytest.fixture
def config() -> DistilBertConfig:
    return DistilBertConfig(
        vocab_size=50, dim=16, max_position_embeddings=20, n_layers=1, n_heads=2, hidden_dim=32
    )


def test_output_shape(config):
    embeddings = Embeddings(config)
    input_ids = torch.randint(0, config.vocab_size, (3, 11))
    assert embeddings(input_ids).shape == (3, 11, config.dim)


def test_matches_manual_composition(config):
    set_seed(0)
    embeddings = Embeddings(config)
    input_ids = torch.randint(0, config.vocab_size, (2, 7))

    word = embeddings.word_embeddings.weight[input_ids]
    position = embeddings.position_embeddings.weight[:7].unsqueeze(0)
    expected = F.layer_norm(
        word + position,
        (config.dim,),
        embeddings.LayerNorm.weight,
        embeddings.LayerNorm.bias,
        eps=1e-12,
    )
    assert torch.allclose(embeddings(input_ids), expected, atol=1e-6)


def test_every_row_uses_the_same_positions(config):
    embeddings = Embeddings(config)
    row = torch.randint(0, config.vocab_size, (1, 9))
    out = embeddings(row.repeat(4, 1))
    for i in range(1, 4):
        assert torch.equal(out[0], out[i])


def test_inference_mode_is_deterministic(config):
    embeddings = Embeddings(config)
    input_ids = torch.randint(0, config.vocab_size, (2, 10))
    assert torch.equal(embeddings(input_ids), embeddings(input_ids))
    # Module.training does not switch dropout on, only the explicit flag does
    embeddings.train()
    assert torch.equal(embeddings(input_ids), embeddings(input_ids, train=False))


def test_train_mode_applies_dropout():
    set_seed(42)
    config = DistilBertConfig(
        vocab_size=50, dim=64, max_position_embeddings=20, n_layers=1, n_heads=2,
        hidden_dim=32, dropout=0.5,
    )
    embeddings = Embeddings(config)
    input_ids = torch.randint(0, config.vocab_size, (2, 10))

    out1 = embeddings(input_ids, train=True)
    out2 = embeddings(input_ids, train=True)
    assert not torch.allclose(out1, out2)

    # Surviving elements are rescaled by 1 / (1 - p)
    reference = embeddings(input_ids)
    kept = out1 != 0
    assert torch.allclose(out1[kept], reference[kept] * 2.0, atol=1e-5)


def test_sinusoidal_configuration(config):
    embeddings = Embeddings(replace(config, sinusoidal_pos_embds=True))
    assert embeddings.position_embeddings.kind == "sinusoidal"
    assert torch.equal(
        embeddings.position_embeddings.weight,
        create_sinusoidal_embeddings(config.max_position_embeddings, config.dim),
    )
    assert "position_embeddings.weight" not in embeddings.state_dict()


def test_layer_norm_epsilon(config):
    assert Embeddings(config).LayerNorm.eps == 1e-12
    assert Embeddings(replace(config, layer_norm_eps=1e-5)).LayerNorm.eps == 1e-5


def test_sequence_longer_than_positions(config):
    embeddings = Embeddings(config)
    with pytest.raises(ValueError):
        embeddings(torch.zeros(1, config.max_position_embeddings + 1, dtype=torch.long))


def test_with_word_embeddings_builds_a_new_instance(config):
    embeddings = Embeddings(config)
    original_weight = embeddings.word_embeddings.weight.detach().clone()
    table = nn.Embedding(config.vocab_size, config.dim, padding_idx=0)

    replaced = embeddings.with_word_embeddings(table)

    assert replaced is not embeddings
    assert replaced.word_embeddings is table
    assert torch.equal(embeddings.word_embeddings.weight, original_weight)
    assert torch.equal(replaced.position_embeddings.weight, embeddings.position_embeddings.weight)
    # Copies, not aliases
    assert replaced.position_embeddings.weight.data_ptr() != (
        embeddings.position_embeddings.weight.data_ptr()
    )


def test_with_word_embeddings_rejects_wrong_shape(config):
    embeddings = Embeddings(config)
    with pytest.raises(ConfigError):
        embeddings.with_word_embeddings(nn.Embedding(config.vocab_size + 1, config.dim))


def test_word_embeddings_cannot_be_swapped_in_place(config):
    embeddings = Embeddings(config)
    table = embeddings.word_embeddings

    with pytest.raises(AttributeError):
        embeddings.word_embeddings = nn.Embedding(99, 3)
    with pytest.raises(AttributeError):
        del embeddings.word_embeddings

    assert embeddings.word_embeddings is table
    assert "word_embeddings.weight" in embeddings.state_dict()
