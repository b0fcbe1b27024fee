"""
Poseidon 해시 파사드 (HashFacade)
===================================

고정 폭 순열 위에 세 가지 해시 연산을 제공한다.

  permute_fixed(inputs)
      1 ≤ len(inputs) ≤ max_inputs 개의 원소를 한 번의 순열로 해시한다.
      - padded 배치:   [x₀, ..., x_{k-1}, 0, ..., 0]          (t 고정)
      - capacity 배치: [0, x₀, ..., x_{k-1}]                  (t = k + 1)
  hash(inputs)
      임의 개수의 원소를 5개씩 청크로 나누고(마지막 청크는 0으로 패딩),
      청크마다 permute_fixed 결과를 r을 법으로 모두 더한다.
  hash_bytes(data)
      31바이트 리틀엔디안 조각으로 패킹한 뒤 hash()에 넘긴다.

**검증 정책**:
  입력 개수(InvalidArity)와 필드 소속(OutOfField) 검사는 이 경계에서
  라운드 계산 전에 한 번만 수행한다. 잘못된 입력으로 부분 계산을 하지 않는다.

사용 예시:
    >>> poseidon = Poseidon()
    >>> poseidon.permute_fixed([1, 2])
    >>> poseidon.hash(range(12))
    >>> poseidon.hash_bytes(b"hello")
"""

from zkhash.errors import InvalidArity
from zkhash.field import FR, to_field_elements
from zkhash.poseidon.constants import get_constants
from zkhash.poseidon.packing import pack_bytes
from zkhash.poseidon.params import REFERENCE, STATE_PADDED, params_from_env
from zkhash.poseidon.permutation import permute


class Poseidon:
    """하나의 파라미터 프리셋에 묶인 Poseidon 해시기.

    상수는 읽기 전용으로 공유되고, 순열 상태는 호출마다 새로 만든다.
    따라서 한 인스턴스를 여러 스레드에서 동시에 써도 된다.

    속성:
        params: PoseidonParams
        constants: Constants (params와 같은 지문(fingerprint)이어야 함)
    """

    def __init__(self, params=None, constants=None):
        if params is None:
            params = constants.params if constants is not None else REFERENCE
        if constants is None:
            constants = get_constants(params)
        elif constants.params.fingerprint() != params.fingerprint():
            raise ValueError("constants were generated for different parameters")
        self.params = params
        self.constants = constants

    @classmethod
    def from_env(cls, environ=None):
        """POSEIDON_PRESET 환경변수가 고른 프리셋으로 만든다."""
        return cls(params_from_env(environ))

    # ─── 내부 ───

    def _check_arity(self, count):
        maximum = self.params.max_inputs
        if count < 1 or count > maximum:
            raise InvalidArity(count, 1, maximum)

    def _initial_state(self, elements):
        t = self.params.width_for(len(elements))
        if self.params.state_layout == STATE_PADDED:
            return list(elements) + [FR(0)] * (t - len(elements))
        return [FR(0)] + list(elements)

    def _permute(self, elements):
        state = self._initial_state(elements)
        return permute(state, self.constants[len(state)])[0]

    # ─── 공개 연산 ───

    def permute_fixed(self, inputs):
        """입력 원소들을 한 번의 순열로 해시한다.

        Raises:
            InvalidArity: 입력이 없거나 max_inputs를 초과
            OutOfField: 원소가 [0, r) 밖
        """
        inputs = list(inputs)
        self._check_arity(len(inputs))
        return self._permute(to_field_elements(inputs))

    def hash(self, inputs):
        """임의 길이 원소 시퀀스의 해시 (청크별 순열 결과의 합).

        Raises:
            InvalidArity: 입력이 비어 있을 때
            OutOfField: 원소가 [0, r) 밖
        """
        inputs = list(inputs)
        if not inputs:
            raise InvalidArity(0, 1, None)
        elements = to_field_elements(inputs)

        size = self.params.chunk_size
        result = FR(0)
        for i in range(0, len(elements), size):
            chunk = elements[i:i + size]
            chunk = chunk + [FR(0)] * (size - len(chunk))
            result = result + self._permute(chunk)
        return result

    def hash_bytes(self, data):
        """바이트열의 해시.

        Raises:
            InvalidArity: data가 비어 있을 때
        """
        return self.hash(pack_bytes(data, self.params.limb_bytes))

    def __repr__(self):
        return f"Poseidon(params={self.params.name!r})"
