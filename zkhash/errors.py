"""
Poseidon 오류 종류
==================

해시 파사드 경계에서 보고되는 오류의 닫힌 집합.

  - InvalidArity: 입력 원소 개수가 0이거나 지원 최대치를 초과
  - OutOfField: 입력 원소가 r 이상 (정규형이 아님)
  - GenerationInvariantViolated: 상수 생성 중 0의 역원 요청 (내부 버그)

앞의 두 가지는 호출자가 처리할 수 있는 ValueError 계열이고,
마지막은 구성 단계에서 즉시 실패해야 하는 RuntimeError 계열이다.
"""


class PoseidonError(Exception):
    """Poseidon 오류의 공통 기반 클래스."""

    kind = "PoseidonError"

    def to_dict(self):
        return {"error": self.kind, "message": str(self)}


class InvalidArity(PoseidonError, ValueError):
    """입력 원소 개수가 [minimum, maximum] 범위를 벗어남."""

    kind = "InvalidArity"

    def __init__(self, actual, minimum, maximum):
        self.actual = actual
        self.minimum = minimum
        self.maximum = maximum
        if maximum is None:
            expected = f"at least {minimum}"
        else:
            expected = f"between {minimum} and {maximum}"
        super().__init__(f"expected {expected} inputs, got {actual}")

    def to_dict(self):
        data = super().to_dict()
        data.update(actual=self.actual, minimum=self.minimum, maximum=self.maximum)
        return data


class OutOfField(PoseidonError, ValueError):
    """index 위치의 입력이 [0, r) 범위 밖."""

    kind = "OutOfField"

    def __init__(self, index, value):
        self.index = index
        self.value = value
        super().__init__(f"input {index} is not a canonical field element: {value}")

    def to_dict(self):
        data = super().to_dict()
        data.update(index=self.index, value=str(self.value))
        return data


class GenerationInvariantViolated(PoseidonError, RuntimeError):
    """상수 생성 불변식 위반. 복구 대상이 아니다."""

    kind = "GenerationInvariantViolated"
