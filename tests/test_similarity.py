"""
Unit tests for the cosine similarity engine.
"""

import math

import pytest

from cligpt.domain.errors import ContractError
from cligpt.domain.similarity import dot, similarity


@pytest.mark.unit
class TestSimilarity:
    """Test cosine similarity properties and concrete values."""

    @pytest.mark.parametrize("vec", [[0.0, 1.0], [0.5, 0.5], [3.0, -4.0, 12.0], [1e-3] * 1536])
    def test_self_similarity_is_one(self, vec):
        assert similarity(vec, vec) == pytest.approx(1.0)

    def test_commutative(self):
        a = [0.3, -1.2, 4.0]
        b = [2.0, 0.1, -0.7]
        assert similarity(a, b) == similarity(b, a)

    def test_orthogonal_is_zero(self):
        assert similarity([0.0, 1.0], [1.0, 0.0]) == 0.0

    def test_diagonal(self):
        assert similarity([0.0, 1.0], [0.5, 0.5]) == pytest.approx(0.70710677, rel=1e-6)

    def test_opposite_is_minus_one(self):
        assert similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_zero_vector_is_undefined(self):
        assert math.isnan(similarity([0.0, 0.0], [1.0, 0.0]))
        assert math.isnan(similarity([1.0, 0.0], [0.0, 0.0]))

    def test_length_mismatch_raises(self):
        with pytest.raises(ContractError):
            similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    def test_dot(self):
        assert dot([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]) == 32.0
