"""
바이트열 → 필드 원소 패킹
==========================

hash_bytes()가 쓰는 변환. 바이트열을 앞에서부터 limb_bytes(기본 31)바이트씩
잘라 각 조각을 리틀엔디안 정수로 읽는다. 마지막의 짧은 나머지도 하나의
원소가 된다.

31바이트 정수는 2^248 미만이므로 r(≈2^254) 보다 항상 작다.

예시:
    >>> pack_bytes(b"\\x01\\x02")        # [FR(0x0201)]
    >>> len(pack_bytes(b"a" * 62))      # 2
    >>> len(pack_bytes(b"a" * 63))      # 3
"""

from zkhash.field import FR
from zkhash.poseidon.params import LIMB_BYTES


def pack_bytes(data, limb_bytes=LIMB_BYTES):
    """bytes → list[FR]"""
    data = bytes(data)
    return [
        FR(int.from_bytes(data[i:i + limb_bytes], "little"))
        for i in range(0, len(data), limb_bytes)
    ]
