"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- スマホ表示を意識したレイアウトとスタイル
- 問題画面の描画（問題文・選択肢・正誤表示）
- ナビゲーションボタン（前へ / 送信 / 次へ）

出題ロジックや統計の更新は session.QuizSession 側に任せる。
ここでは「見た目」と「ユーザー操作の入力」だけを扱い、
戻り値として「何が押されたか」「どの選択肢が選ばれているか」を返す。
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from .models import Question
from .session import QuizSession, Renderer

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#ffffff",
        "text": "#1c1c1e",
        "surface": "#f2f2f7",
        "border": "#d1d1d6",
        "primary": "#007aff",
        "correct": "#34c759",
        "incorrect": "#ff3b30",
    },
    "dark": {
        "bg": "#000000",
        "text": "#f5f5f7",
        "surface": "#1c1c1e",
        "border": "#3a3a3c",
        "primary": "#0a84ff",
        "correct": "#30d158",
        "incorrect": "#ff453a",
    },
}


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    html, body {{
        background: {theme['bg']};
        color: {theme['text']};
        -webkit-text-size-adjust: 100%;
        touch-action: manipulation;
    }}

    .dq-question-box {{
        background: {theme['surface']};
        padding: 1rem;
        border-radius: 12px;
        border: 1px solid {theme['border']};
        font-size: 1.1rem;
        line-height: 1.6;
        margin: 0.5rem 0 0.75rem 0;
    }}

    .dq-position {{
        font-size: 0.8rem;
        color: {theme['text']}aa;
    }}

    .dq-feedback-correct {{
        padding: 0.75rem;
        border-radius: 10px;
        border: 1px solid {theme['correct']};
        background: {theme['correct']}22;
    }}

    .dq-feedback-incorrect {{
        padding: 0.75rem;
        border-radius: 10px;
        border: 1px solid {theme['incorrect']};
        background: {theme['incorrect']}22;
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  テーマ関連
# ----------------------------------------------------------------------
def _ensure_theme() -> str:
    """セッションに theme キーを用意し、現在のテーマキーを返す。"""
    theme_key = st.session_state.get("theme", "light")
    if theme_key not in THEMES:
        theme_key = "light"
    st.session_state["theme"] = theme_key
    return theme_key


def render_theme_selector() -> str:
    options = list(THEMES.keys())
    theme_key = _ensure_theme()
    selected = st.radio(
        "テーマ",
        options,
        index=options.index(theme_key),
        horizontal=True,
        format_func=lambda k: k.title(),
    )
    st.session_state["theme"] = selected
    return selected


# ----------------------------------------------------------------------
#  Renderer 実装
# ----------------------------------------------------------------------
class StreamlitRenderer(Renderer):
    """
    セッションから display_question() で渡された問題を覚えておき、
    Streamlit の再実行時に render_quiz_page() がそれを描画する。
    """

    def __init__(self):
        self.question: Optional[Question] = None
        self.can_retreat = False
        self.display_count = 0

    def display_question(self, question: Question, *, can_retreat: bool) -> None:
        self.question = question
        self.can_retreat = can_retreat
        self.display_count += 1


# ----------------------------------------------------------------------
#  公開 API: クイズページの描画
# ----------------------------------------------------------------------
def render_quiz_page(session: QuizSession, renderer: StreamlitRenderer) -> Dict[str, Any]:
    """
    クイズページ全体を描画し、ユーザー操作の結果を返す。

    戻り値:
        {
          "selected_key": Optional[str],  # ラジオで選ばれている選択肢キー
          "clicked_submit": bool,
          "clicked_next": bool,
          "clicked_prev": bool,
        }
    """
    result: Dict[str, Any] = {
        "selected_key": None,
        "clicked_submit": False,
        "clicked_next": False,
        "clicked_prev": False,
    }

    q = renderer.question
    if q is None:
        st.error("問題がまだ選択されていません。")
        return result

    theme = THEMES[_ensure_theme()]
    st.markdown(_generate_css(theme), unsafe_allow_html=True)

    st.markdown(
        f"<div class='dq-position'>{session.position} / {len(session.history)}</div>",
        unsafe_allow_html=True,
    )
    st.markdown(
        f"<div class='dq-question-box'>{q.label()}</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 選択肢（ファイル上の順で表示）
    # ----------------------------------------
    # 表示のたびに key を変えて、移動したら選択がリセットされるようにする
    result["selected_key"] = st.radio(
        "選択肢",
        q.option_keys(),
        index=None,
        key=f"dq_options_{renderer.display_count}",
        format_func=lambda k: f"{k}. {q.options[k]}",
        disabled=session.answered,
        label_visibility="collapsed",
    )

    # ----------------------------------------
    # 正誤表示（解答済みの場合のみ）
    # ----------------------------------------
    answer = session.last_result
    if session.answered and answer is not None:
        css = "dq-feedback-correct" if answer.is_correct else "dq-feedback-incorrect"
        st.markdown(
            f"<div class='{css}'>{answer.message()}</div>",
            unsafe_allow_html=True,
        )
        if q.explanation:
            with st.expander("解説"):
                st.write(q.explanation)

    # ----------------------------------------
    # ナビゲーション
    # ----------------------------------------
    col_prev, col_submit, col_next = st.columns(3)
    with col_prev:
        # 先頭では「前へ」を出さない
        if renderer.can_retreat:
            if st.button("◀ 前の問題", key="dq_prev", use_container_width=True):
                result["clicked_prev"] = True
    with col_submit:
        if st.button(
            "送信",
            key="dq_submit",
            disabled=session.answered,
            type="primary",
            use_container_width=True,
        ):
            result["clicked_submit"] = True
    with col_next:
        if session.answered or session.history.has_next():
            if st.button("次の問題 ▶", key="dq_next", use_container_width=True):
                result["clicked_next"] = True

    return result
