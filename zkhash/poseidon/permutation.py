"""
Poseidon 순열 엔진 (PermutationEngine)
========================================

폭 t의 상태에 전체 라운드 스케줄을 적용한다.

**라운드 구조** (라운드 i, 0부터 시작):
  ┌──────────────────────────────────────────────────────────┐
  │  1. ARK:   state[j] += rc[i·t + j]        (모든 슬롯)     │
  │  2. S-box: 전체 라운드 → 모든 슬롯 x⁵                      │
  │            부분 라운드 → state[0]만 x⁵                     │
  │  3. MDS:   new[i] = Σ_j M[i][j] · state[j]                │
  └──────────────────────────────────────────────────────────┘

  전체 라운드는 처음 n_full/2 개와 마지막 n_full/2 개이고,
  그 사이 n_partial 개가 부분 라운드이다.
  마지막 라운드에서도 MDS 혼합을 수행한다.

**x⁵ 계산**:
  x² = x·x,  x⁴ = x²·x²,  x⁵ = x⁴·x
  제곱 두 번과 곱셈 한 번. 회로 제약으로 표현할 때와 같은 모양을 유지한다.

이 계층에는 실패 경로가 없다. 입력 개수와 필드 소속 검사는
hasher.Poseidon이 순열에 들어가기 전에 끝낸다.
"""

from zkhash.field import FR


def pow5(x):
    """x⁵ = ((x²)²)·x"""
    x2 = x * x
    x4 = x2 * x2
    return x4 * x


def is_full_round(i, n_rounds_full, n_rounds_partial):
    """라운드 i가 전체 라운드인지 여부."""
    half = n_rounds_full // 2
    return i < half or i >= half + n_rounds_partial


def ark(state, round_constants):
    """Add-Round-Key: 슬롯별 상수를 더한 새 상태."""
    return [s + c for s, c in zip(state, round_constants)]


def sbox(state, full):
    """S-box 계층. full이면 모든 슬롯, 아니면 슬롯 0만."""
    if full:
        return [pow5(s) for s in state]
    return [pow5(state[0])] + list(state[1:])


def mix(state, matrix):
    """MDS 혼합: new[i] = Σ_j M[i][j] · state[j]"""
    new_state = []
    for row in matrix:
        acc = FR(0)
        for m, s in zip(row, state):
            acc = acc + m * s
        new_state.append(acc)
    return new_state


def permute(state, width_constants):
    """상태 전체에 순열을 적용하고 최종 상태를 돌려준다.

    Args:
        state: 길이 t의 FR 리스트 (호출자 소유, 변경하지 않음)
        width_constants: 같은 t의 WidthConstants

    Returns:
        list[FR]: 최종 상태. 해시 결과는 [0] 슬롯이다.
    """
    t = width_constants.t
    if len(state) != t:
        raise ValueError(f"state length {len(state)} does not match width {t}")

    n_full = width_constants.n_rounds_full
    n_partial = width_constants.n_rounds_partial
    state = list(state)
    for i in range(width_constants.total_rounds):
        state = ark(state, width_constants.round_slice(i))
        state = sbox(state, is_full_round(i, n_full, n_partial))
        state = mix(state, width_constants.mds)
    return state
