from enum import Enum


class EntryPoint(Enum):
    SEND_NATIVE = "sendNative"
    SEND_TOKEN = "sendToken"
    RESCUE_TOKEN = "rescueToken"
    RESCUE_NATIVE = "rescueNative"
