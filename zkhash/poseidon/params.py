"""
Poseidon 파라미터와 프리셋
===========================

상수 생성과 순열(permutation) 적용이 공유하는 설정값을 묶는다.
두 쪽이 같은 PoseidonParams를 써야 해시가 일관된다.

**프리셋**:
  reference
    - t = 6 고정, 전체 라운드 8 / 부분 라운드 57
    - 라운드 상수: 라운드마다 한 개 (per_round), 모든 슬롯에 같은 값을 더함
    - 상태 배치: 입력을 앞에서부터 채우고 나머지는 0 (padded)
  variable
    - t = 입력 개수 + 1 (t = 2..6)
    - 라운드 상수: (라운드, 슬롯)마다 한 개 (per_slot)
    - 상태 배치: 슬롯 0은 용량(capacity) 원소 0, 그 뒤에 입력 (capacity)

두 프리셋 모두 혼합 단계는 new[i] = Σ_j M[i][j]·state[j] 이며,
마지막 라운드에서도 혼합을 생략하지 않는다.

환경변수:
    POSEIDON_PRESET: params_from_env()가 고를 프리셋 이름 (기본값: reference)

사용 예시:
    >>> params = get_params("reference")
    >>> params.widths        # (6,)
    >>> params.total_rounds(6)  # 65
"""

import os
from types import MappingProxyType


DEFAULT_SEED = "poseidon"

# 라운드 상수 배치
LAYOUT_PER_ROUND = "per_round"
LAYOUT_PER_SLOT = "per_slot"

# 상태 배치
STATE_PADDED = "padded"
STATE_CAPACITY = "capacity"

# hash()가 한 번의 순열에 넣는 원소 수
CHUNK_SIZE = 5

# hash_bytes()의 바이트 → 원소 패킹 폭 (32바이트 필드보다 좁아야 함)
LIMB_BYTES = 31

PRESET_ENV_VAR = "POSEIDON_PRESET"


class PoseidonParams:
    """Poseidon 인스턴스 하나를 정의하는 불변 파라미터 묶음.

    속성:
        name: 프리셋 이름 (표시용)
        seed: 상수 유도용 시드 문자열
        n_rounds_full: 전체 라운드 수 (짝수, 앞/뒤 절반씩)
        n_rounds_partial: {t: 부분 라운드 수}
        constant_layout: "per_round" 또는 "per_slot"
        state_layout: "padded" 또는 "capacity"
        chunk_size: hash()의 청크 크기
        limb_bytes: hash_bytes()의 패킹 폭
    """

    def __init__(self, name, n_rounds_full, n_rounds_partial,
                 constant_layout, state_layout, seed=DEFAULT_SEED,
                 chunk_size=CHUNK_SIZE, limb_bytes=LIMB_BYTES):
        if n_rounds_full <= 0 or n_rounds_full % 2 != 0:
            raise ValueError(f"n_rounds_full must be a positive even number: {n_rounds_full}")
        if not n_rounds_partial:
            raise ValueError("at least one width must be configured")
        for t, n_partial in n_rounds_partial.items():
            if t < 2:
                raise ValueError(f"width must be at least 2: {t}")
            if n_partial <= 0:
                raise ValueError(f"n_rounds_partial[{t}] must be positive: {n_partial}")
        if constant_layout not in (LAYOUT_PER_ROUND, LAYOUT_PER_SLOT):
            raise ValueError(f"unknown constant layout: {constant_layout}")
        if state_layout not in (STATE_PADDED, STATE_CAPACITY):
            raise ValueError(f"unknown state layout: {state_layout}")
        if state_layout == STATE_PADDED and len(n_rounds_partial) != 1:
            raise ValueError("padded state layout uses exactly one width")
        if (state_layout == STATE_CAPACITY
                and sorted(n_rounds_partial) != list(range(2, max(n_rounds_partial) + 1))):
            raise ValueError("capacity state layout needs every width from 2 upwards")
        if not 0 < limb_bytes < 32:
            raise ValueError(f"limb_bytes must be between 1 and 31: {limb_bytes}")

        self.name = name
        self.seed = seed
        self.n_rounds_full = n_rounds_full
        self.n_rounds_partial = MappingProxyType(dict(sorted(n_rounds_partial.items())))
        self.constant_layout = constant_layout
        self.state_layout = state_layout
        self.chunk_size = chunk_size
        self.limb_bytes = limb_bytes

        if self.max_inputs < chunk_size:
            raise ValueError(
                f"chunk_size {chunk_size} exceeds the maximum arity {self.max_inputs}"
            )

    @property
    def widths(self):
        """지원하는 상태 폭 t 목록 (오름차순)."""
        return tuple(self.n_rounds_partial)

    @property
    def max_width(self):
        return self.widths[-1]

    @property
    def max_inputs(self):
        """permute_fixed가 받을 수 있는 최대 입력 개수."""
        if self.state_layout == STATE_PADDED:
            return self.max_width
        return self.max_width - 1

    def width_for(self, arity):
        """입력 개수 arity에 대응하는 상태 폭 t."""
        if self.state_layout == STATE_PADDED:
            return self.max_width
        return arity + 1

    def total_rounds(self, t):
        return self.n_rounds_full + self.n_rounds_partial[t]

    def fingerprint(self):
        """상수 테이블을 결정하는 값들의 튜플. 캐시 키로 쓴다."""
        return (
            self.seed,
            self.n_rounds_full,
            tuple(self.n_rounds_partial.items()),
            self.constant_layout,
        )

    def describe(self):
        return {
            "name": self.name,
            "seed": self.seed,
            "n_rounds_full": self.n_rounds_full,
            "n_rounds_partial": {str(t): n for t, n in self.n_rounds_partial.items()},
            "constant_layout": self.constant_layout,
            "state_layout": self.state_layout,
            "chunk_size": self.chunk_size,
            "limb_bytes": self.limb_bytes,
            "max_inputs": self.max_inputs,
        }

    def __repr__(self):
        return f"PoseidonParams(name={self.name!r}, widths={self.widths})"


# ─────────────────────────────────────────────────────────────────────
# 프리셋
# ─────────────────────────────────────────────────────────────────────

REFERENCE = PoseidonParams(
    name="reference",
    n_rounds_full=8,
    n_rounds_partial={6: 57},
    constant_layout=LAYOUT_PER_ROUND,
    state_layout=STATE_PADDED,
)

VARIABLE = PoseidonParams(
    name="variable",
    n_rounds_full=8,
    n_rounds_partial={2: 56, 3: 57, 4: 56, 5: 60, 6: 60},
    constant_layout=LAYOUT_PER_SLOT,
    state_layout=STATE_CAPACITY,
)

PRESETS = MappingProxyType({
    REFERENCE.name: REFERENCE,
    VARIABLE.name: VARIABLE,
})


def get_params(name):
    """이름으로 프리셋을 찾는다.

    Raises:
        ValueError: 알 수 없는 프리셋 이름
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"unknown Poseidon preset {name!r}; choose one of {sorted(PRESETS)}"
        ) from None


def params_from_env(environ=None):
    """POSEIDON_PRESET 환경변수로 프리셋을 고른다."""
    if environ is None:
        environ = os.environ
    return get_params(environ.get(PRESET_ENV_VAR, REFERENCE.name))
