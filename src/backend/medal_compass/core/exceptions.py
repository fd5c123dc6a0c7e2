# medal_compass/core/exceptions.py
# サービス層が送出するドメイン例外．messageはそのままユーザーに表示できる文言にしておく．
# status_codeはmain.pyの例外ハンドラがHTTPレスポンスに変換する際に使う．


class MedalCompassError(Exception):
    status_code = 500
    default_message = "エラーが発生しました。再度お試しください。"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PersistenceError(MedalCompassError):
    """
    バックエンド（DB）の一時的・一般的な障害．
    """
    status_code = 503
    default_message = "通信に失敗しました。再度お試しください。"


class DuplicateReportError(MedalCompassError):
    status_code = 409
    default_message = "既に通報済みです"


class DuplicateCollectionError(MedalCompassError):
    status_code = 409
    default_message = "既に獲得済みです"


class MedalNotFoundError(MedalCompassError):
    status_code = 404
    default_message = "メダルが見つかりません"


class PermissionDeniedError(MedalCompassError):
    status_code = 403
    default_message = "この操作を行う権限がありません"


class LowAccuracyError(MedalCompassError):
    """
    測位精度が閾値を超えている．エラーではなく「このまま続けるか」の確認を促すためのもの．
    """
    status_code = 428

    def __init__(self, accuracy: float | None, threshold: float):
        self.accuracy = accuracy
        self.threshold = threshold
        accuracy_text = f"{accuracy:.0f}m" if accuracy is not None else "不明"
        super().__init__(
            f"測位精度が低いです（{threshold:.0f}m以下を推奨）。\n"
            f"現在の測位精度: {accuracy_text}\n登録を続けますか？"
        )
