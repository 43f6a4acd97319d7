"""
例外定義モジュール。

インタプリタコアが送出する例外の階層を定義します。
全ての例外は Chip8Error を基底とし、呼び出し元（ドライバ）が
致命的なサイクルと回復可能なロード失敗を区別できるようにします。
"""

# @intent:responsibility 本パッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass

# @intent:responsibility ROMの読み込みに失敗したことを示します。回復可能なエラーです。
# @intent:rationale 入力値の不正として ValueError でも捕捉できます。
class RomLoadError(Chip8Error, ValueError):
    pass

# @intent:responsibility 設定ファイルの内容が不正であることを示します。
class ConfigError(Chip8Error, ValueError):
    pass

# @intent:responsibility コールスタックの不正使用を示す致命的エラーの基底クラス。
class StackError(Chip8Error):
    pass

class StackOverflowError(StackError):
    """スタックが満杯(sp == 16)の状態でCALLが実行された。"""

class StackUnderflowError(StackError):
    """スタックが空(sp == 0)の状態でRETが実行された。"""

# @intent:responsibility マップされていないアドレスへのアクセスを示します。
# @intent:rationale 範囲外アクセスとして IndexError でも捕捉できます。
class MemoryAccessError(Chip8Error, IndexError):
    def __init__(self, address: int, message: str = ""):
        self.address = address
        super().__init__(message or f"Address {address:#06x} not mapped to any device.")

# @intent:responsibility 致命的なサイクルの後、reset()せずにstep()が呼ばれたことを示します。
class MachineHaltedError(Chip8Error):
    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"CPU is halted after a fatal cycle: {cause}")
