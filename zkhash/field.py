"""
Poseidon 기반 모듈: 유한체(Finite Field) 원소와 인코딩
=======================================================

이 모듈은 Poseidon 해시 전체에서 사용되는 기본 산술 단위를 정의한다.

**유한체 FR**:
  bn128(BN254) 곡선의 스칼라 필드. BabyJubjub 곡선의 기저체이기도 하다.
  - 위수(order) r ≈ 2^254, 소수체(prime field)
  - 필드 산술 자체는 py_ecc에 위임한다 (직접 구현하지 않는다)

**입력 검증**:
  해시 입력은 이미 r 미만으로 축소된 값이어야 한다.
  r 이상의 값을 조용히 축소하면 호출자의 버그가 감춰지므로
  `to_field_element`는 축소 대신 OutOfField를 발생시킨다.

**바이트 인코딩**:
  필드 원소는 32바이트 리틀엔디안(little-endian)으로 직렬화한다.

사용 예시:
    >>> from zkhash.field import FR, to_field_element, fr_to_bytes
    >>> x = to_field_element(7)
    >>> x * x            # FR(49)
    >>> fr_to_bytes(x)   # b'\\x07' + b'\\x00' * 31
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128
from py_ecc.utils import prime_field_inv

from zkhash.errors import OutOfField, GenerationInvariantViolated


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, ** 등의 필드 연산을 제공한다.
    모든 연산 결과는 항상 [0, r) 범위로 축소되어 있다.

    속성:
        field_modulus: bn128 곡선 위수 (소수 r)
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
# 21888242871839275222246405745257275088548364400416034343698204186575808495617
CURVE_ORDER = bn128.curve_order

# 직렬화 길이 (바이트)
FR_BYTES = 32


# ─────────────────────────────────────────────────────────────────────
# 모듈러 역원
# ─────────────────────────────────────────────────────────────────────

def modinv(a, q=CURVE_ORDER):
    """확장 유클리드 알고리즘으로 a의 모듈러 역원을 구한다.

    a ≡ 0 (mod q)이면 역원이 정의되지 않는다. 상수 생성 과정에서 이런 값이
    나오면 거부 샘플링(rejection sampling) 검증이 잘못된 것이므로
    GenerationInvariantViolated를 발생시킨다.

    Args:
        a: 정수 (음수 허용, q로 축소된다)
        q: 소수 모듈러스 (기본값: CURVE_ORDER)

    Returns:
        int: (a * inv) % q == 1 을 만족하는 inv ∈ [1, q)

    Raises:
        GenerationInvariantViolated: a ≡ 0 (mod q)일 때

    예시:
        >>> modinv(3) * 3 % CURVE_ORDER  # 1
    """
    a = int(a) % q
    if a == 0:
        raise GenerationInvariantViolated("modular inverse of zero requested")
    return prime_field_inv(a, q)


# ─────────────────────────────────────────────────────────────────────
# 입력 변환 / 필드 소속 검사
# ─────────────────────────────────────────────────────────────────────

def is_in_field(value, modulus=CURVE_ORDER):
    """정수 value가 [0, modulus) 범위의 정규형(canonical)인지 확인한다."""
    return 0 <= value < modulus


def to_field_element(value, index=0):
    """호출자 입력을 FR 원소로 변환한다.

    허용 타입:
        - FR: 그대로 반환 (이미 정규형)
        - int: [0, r) 범위 검사 후 변환
        - FQ (다른 모듈러스의 py_ecc 원소): 정수값 기준으로 범위 검사
        - str: 10진수 또는 "0x" 접두사 16진수 문자열

    Args:
        value: 변환할 값
        index: 입력 시퀀스 내 위치 (오류 보고용)

    Returns:
        FR: 변환된 원소

    Raises:
        OutOfField: 값이 r 이상이거나 음수일 때
        TypeError: 지원하지 않는 타입일 때
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool):
        raise TypeError(f"bool is not a field element (index {index})")
    if isinstance(value, FQ):
        value = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            value = int(text, 16)
        else:
            value = int(text, 10)
    elif not isinstance(value, int):
        raise TypeError(
            f"cannot convert {type(value).__name__} to a field element (index {index})"
        )
    if not is_in_field(value):
        raise OutOfField(index, value)
    return FR(value)


def to_field_elements(values):
    """시퀀스 전체를 FR 리스트로 변환한다. 첫 번째 위반 위치에서 실패한다."""
    return [to_field_element(v, i) for i, v in enumerate(values)]


# ─────────────────────────────────────────────────────────────────────
# 바이트 인코딩 (32바이트 리틀엔디안)
# ─────────────────────────────────────────────────────────────────────

def fr_to_bytes(value):
    """FR 원소 → 32바이트 리틀엔디안."""
    return int(value).to_bytes(FR_BYTES, "little")


def fr_from_bytes(data):
    """32바이트 리틀엔디안 → FR 원소.

    Raises:
        ValueError: 길이가 32바이트가 아닐 때
        OutOfField: 인코딩된 값이 r 이상일 때 (비정규 인코딩)
    """
    if len(data) != FR_BYTES:
        raise ValueError(f"field element encoding must be {FR_BYTES} bytes, got {len(data)}")
    value = int.from_bytes(data, "little")
    if not is_in_field(value):
        raise OutOfField(0, value)
    return FR(value)
