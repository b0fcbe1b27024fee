"""
Poseidon Hash Facade Tests
===========================

permute_fixed / hash / hash_bytes 동작과 기준 해시값(known answers)을 테스트한다.

테스트 범위:
  - reference 프리셋 기준값: [1, 2], [3, 4], Lorem ipsum 바이트열
  - 입력 검증: InvalidArity, OutOfField (라운드 계산 전에 실패)
  - 청크 합성: hash(5k개) == Σ permute_fixed(청크)
  - variable 프리셋: t = 입력 개수 + 1, 용량 슬롯
  - 스레드 간 공유 상수로 동시 해시
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from zkhash.errors import InvalidArity, OutOfField
from zkhash.field import FR, CURVE_ORDER
from zkhash.poseidon.constants import get_constants
from zkhash.poseidon.hasher import Poseidon
from zkhash.poseidon.packing import pack_bytes
from zkhash.poseidon.params import REFERENCE, VARIABLE
from zkhash.poseidon.permutation import permute


HASH_1_2 = 12242166908188651009877250812424843524687801523336557272219921456462821518061
HASH_3_4 = 17185195740979599334254027721507328033796809509313949281114643312710535000993

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    "quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo "
    "consequat. Duis aute irure dolor in reprehenderit in voluptate velit esse "
    "cillum dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non "
    "proident, sunt in culpa qui officia deserunt mollit anim id est laborum."
)
LOREM_LONG = LOREM + " Lorem ipsum dolor sit amet."
HASH_LOREM = 11821124228916291136371255062457365369197326845706357273715164664419275913793
HASH_LOREM_LONG = 10747013384255785702102976082726575658403084163954725275481577373644732938016


# ─────────────────────────────────────────────────────────────────────
# Known answers (reference preset)
# ─────────────────────────────────────────────────────────────────────

class TestKnownAnswers:
    def test_permute_1_2(self, reference_hasher):
        assert reference_hasher.permute_fixed([1, 2]) == FR(HASH_1_2)

    def test_permute_3_4(self, reference_hasher):
        assert reference_hasher.permute_fixed([3, 4]) == FR(HASH_3_4)

    def test_outputs_differ(self):
        assert HASH_1_2 != HASH_3_4

    def test_hash_of_short_sequence_equals_single_permutation(self, reference_hasher):
        """one zero-padded chunk lands in the same t=6 state"""
        assert reference_hasher.hash([1, 2]) == FR(HASH_1_2)

    def test_hash_bytes_lorem(self, reference_hasher):
        assert int(reference_hasher.hash_bytes(LOREM.encode())) == HASH_LOREM

    def test_hash_bytes_lorem_long(self, reference_hasher):
        assert int(reference_hasher.hash_bytes(LOREM_LONG.encode())) == HASH_LOREM_LONG

    def test_stable_across_instances(self):
        a = Poseidon(REFERENCE)
        b = Poseidon(constants=get_constants(REFERENCE))
        assert a.permute_fixed([1, 2]) == b.permute_fixed([1, 2])

    def test_accepts_string_and_fr_inputs(self, reference_hasher):
        assert reference_hasher.permute_fixed(["1", FR(2)]) == FR(HASH_1_2)
        assert reference_hasher.permute_fixed(["0x3", "4"]) == FR(HASH_3_4)


# ─────────────────────────────────────────────────────────────────────
# Input validation
# ─────────────────────────────────────────────────────────────────────

class TestValidation:
    def test_hash_empty(self, reference_hasher):
        with pytest.raises(InvalidArity) as exc:
            reference_hasher.hash([])
        assert exc.value.actual == 0

    def test_hash_modulus(self, reference_hasher):
        with pytest.raises(OutOfField) as exc:
            reference_hasher.hash([CURVE_ORDER])
        assert exc.value.index == 0

    def test_hash_checks_whole_sequence_up_front(self, reference_hasher):
        inputs = list(range(1, 12)) + [CURVE_ORDER + 3]
        with pytest.raises(OutOfField) as exc:
            reference_hasher.hash(inputs)
        assert exc.value.index == 11

    def test_permute_empty(self, reference_hasher):
        with pytest.raises(InvalidArity):
            reference_hasher.permute_fixed([])

    def test_permute_full_width_allowed(self, reference_hasher):
        """padded layout fills all six slots"""
        assert reference_hasher.params.max_inputs == 6
        reference_hasher.permute_fixed([1, 2, 3, 4, 5, 6])

    def test_permute_too_many(self, reference_hasher):
        with pytest.raises(InvalidArity) as exc:
            reference_hasher.permute_fixed([1] * 7)
        assert exc.value.maximum == 6
        assert exc.value.actual == 7

    def test_arity_checked_before_field(self, reference_hasher):
        with pytest.raises(InvalidArity):
            reference_hasher.permute_fixed([CURVE_ORDER] * 7)

    def test_permute_out_of_field(self, reference_hasher):
        with pytest.raises(OutOfField) as exc:
            reference_hasher.permute_fixed([1, CURVE_ORDER])
        assert exc.value.index == 1

    def test_hash_bytes_empty(self, reference_hasher):
        with pytest.raises(InvalidArity):
            reference_hasher.hash_bytes(b"")

    def test_mismatched_constants(self, reference_constants):
        with pytest.raises(ValueError):
            Poseidon(VARIABLE, reference_constants)


# ─────────────────────────────────────────────────────────────────────
# Chunked composition
# ─────────────────────────────────────────────────────────────────────

class TestChunking:
    def test_multiple_of_five(self, reference_hasher):
        inputs = list(range(1, 11))
        expected = reference_hasher.permute_fixed(inputs[:5]) + \
            reference_hasher.permute_fixed(inputs[5:])
        assert reference_hasher.hash(inputs) == expected

    def test_last_chunk_zero_padded(self, reference_hasher):
        inputs = [7, 8, 9, 10, 11, 12, 13]
        expected = reference_hasher.permute_fixed([7, 8, 9, 10, 11]) + \
            reference_hasher.permute_fixed([12, 13, 0, 0, 0])
        assert reference_hasher.hash(inputs) == expected

    def test_variable_multiple_of_five(self, variable_hasher):
        inputs = list(range(20, 30))
        expected = variable_hasher.permute_fixed(inputs[:5]) + \
            variable_hasher.permute_fixed(inputs[5:])
        assert variable_hasher.hash(inputs) == expected

    def test_hash_bytes_uses_31_byte_limbs(self, reference_hasher):
        data = bytes(range(70))
        assert reference_hasher.hash_bytes(data) == reference_hasher.hash(pack_bytes(data))


# ─────────────────────────────────────────────────────────────────────
# Byte packing and avalanche smoke test
# ─────────────────────────────────────────────────────────────────────

class TestBytes:
    def test_pack_lengths(self):
        assert len(pack_bytes(b"a" * 31)) == 1
        assert len(pack_bytes(b"a" * 62)) == 2
        assert len(pack_bytes(b"a" * 63)) == 3
        assert pack_bytes(b"") == []

    def test_pack_little_endian(self):
        assert pack_bytes(b"\x01\x02") == [FR(0x0201)]
        limbs = pack_bytes(bytes([1] + [0] * 30 + [5]))
        assert limbs == [FR(1), FR(5)]

    def test_pack_fits_field(self):
        limb = pack_bytes(b"\xff" * 31)[0]
        assert int(limb) == 2 ** 248 - 1

    def test_append_or_remove_byte_changes_hash(self, reference_hasher):
        base = LOREM.encode()
        h = reference_hasher.hash_bytes(base)
        assert reference_hasher.hash_bytes(base + b"!") != h
        assert reference_hasher.hash_bytes(base[:-1]) != h

    def test_flip_one_byte_changes_hash(self, reference_hasher):
        data = bytearray(b"poseidon")
        h = reference_hasher.hash_bytes(bytes(data))
        data[3] ^= 0x01
        assert reference_hasher.hash_bytes(bytes(data)) != h


# ─────────────────────────────────────────────────────────────────────
# Variable-width preset
# ─────────────────────────────────────────────────────────────────────

class TestVariableWidth:
    def test_capacity_slot_layout(self, variable_hasher, variable_constants):
        state = [FR(0), FR(1), FR(2)]
        expected = permute(state, variable_constants[3])[0]
        assert variable_hasher.permute_fixed([1, 2]) == expected

    def test_every_arity(self, variable_hasher):
        outputs = [variable_hasher.permute_fixed(list(range(1, k + 1))) for k in range(1, 6)]
        assert len({int(h) for h in outputs}) == 5

    def test_max_arity(self, variable_hasher):
        assert variable_hasher.params.max_inputs == 5
        with pytest.raises(InvalidArity):
            variable_hasher.permute_fixed([1] * 6)

    def test_presets_disagree(self, variable_hasher, reference_hasher):
        assert variable_hasher.permute_fixed([1, 2]) != reference_hasher.permute_fixed([1, 2])

    def test_deterministic(self, variable_hasher):
        assert variable_hasher.hash([3, 4]) == variable_hasher.hash([3, 4])


# ─────────────────────────────────────────────────────────────────────
# Concurrency / configuration
# ─────────────────────────────────────────────────────────────────────

class TestSharing:
    def test_concurrent_hashing(self, reference_hasher):
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: reference_hasher.permute_fixed([1, 2]), range(4)))
        assert all(r == FR(HASH_1_2) for r in results)

    def test_from_env(self):
        assert Poseidon.from_env({}).params is REFERENCE
        assert Poseidon.from_env({"POSEIDON_PRESET": "variable"}).params is VARIABLE
