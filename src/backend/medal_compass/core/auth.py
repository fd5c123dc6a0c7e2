# medal_compass/core/auth.py
# 呼び出し元ユーザーの特定．IDプロバイダのセッション検証は前段のゲートウェイが行い，
# 検証済みのユーザーIDを X-User-Id ヘッダで渡してくる前提．
# サービス層はグローバルな状態を参照せず，ここで得たuser_idを引数として受け取る．
from dataclasses import dataclass
from fastapi import Header, HTTPException

@dataclass(frozen=True)
class CurrentUser:
    user_id: str

def get_current_user(x_user_id: str | None = Header(default=None)) -> CurrentUser:
    """
    FastAPIのDepends()に渡すための関数．
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="ログインしてください")
    return CurrentUser(user_id=x_user_id.strip())
