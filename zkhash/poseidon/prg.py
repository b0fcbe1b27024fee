"""
Poseidon 의사난수 생성기 (PRG)
================================

시드 문자열에서 결정론적인 필드 스칼라 수열을 유도한다.

**알고리즘**:
  h₀ = H(seed)                       H = BLAKE2b, 32바이트 출력
  xᵢ = int_le(hᵢ) mod r              32바이트 다이제스트 → 리틀엔디안 정수 → r로 축소
  hᵢ₊₁ = H(hᵢ)

  r 이상의 값을 버리지 않고 축소하므로 작은 잉여 쪽으로 아주 약간 치우친다.
  이 편향은 기준 상수와 일치시키기 위해 그대로 둔다.

**재시작 가능성**:
  같은 시드로 다시 시작하면 항상 같은 접두사(prefix)가 나온다.
  derive(seed, n)은 derive(seed, n + k)의 앞 n개와 같다.

사용 예시:
    >>> derive("poseidon_constants", 2)
    [FR(...), FR(...)]
"""

import hashlib
from itertools import islice

from zkhash.field import FR, CURVE_ORDER


DIGEST_SIZE = 32


def blake2b_256(data):
    """H(data): 32바이트 BLAKE2b 다이제스트."""
    return hashlib.blake2b(data, digest_size=DIGEST_SIZE).digest()


def iter_pseudo_random(seed, modulus=CURVE_ORDER):
    """시드에서 무한히 이어지는 스칼라(int) 스트림.

    Args:
        seed: 시드 문자열 (UTF-8로 인코딩) 또는 bytes
        modulus: 축소에 쓸 모듈러스

    Yields:
        int: [0, modulus) 범위의 스칼라
    """
    if isinstance(seed, str):
        seed = seed.encode("utf-8")
    h = blake2b_256(seed)
    while True:
        yield int.from_bytes(h, "little") % modulus
        h = blake2b_256(h)


def derive(seed, count):
    """seed에서 count개의 FR 원소를 유도한다.

    Args:
        seed: 시드 문자열
        count: 생성할 원소 수 (0 이상)

    Returns:
        list[FR]: 길이 count의 리스트
    """
    if count < 0:
        raise ValueError(f"count must be non-negative: {count}")
    return [FR(x) for x in islice(iter_pseudo_random(seed), count)]
