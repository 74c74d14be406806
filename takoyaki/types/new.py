# takoyaki/types/new.py

from typing import NewType, Any


Base58Str = NewType('Base58Str', str)
PublicKey = NewType('PublicKey', str)
SignatureStr = NewType('SignatureStr', str)
BlockHash = NewType('BlockHash', str)
IntStr = NewType('IntStr', str)  # integer encoded as a decimal string ("JsBigInt")
HexStr = NewType('HexStr', str)
ErrorId = NewType('ErrorId', str)

JSON = Any
