"""
app.py
======================

復習重み付きクイズアプリ（Streamlit）エントリーポイント。

特徴:
- 間違えた問題・出題の少ない問題ほど再出題されやすい
- 前へ / 次へで、このセッションで見た問題を見直せる
- 出題回数・誤答回数・閲覧位置はファイルに保存され、再読み込み後も続きから

前提:
- data/merged_questions.json に問題が格納されている
- config.toml があれば読み込む（無ければデフォルト設定）

起動:
    streamlit run app.py
"""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from drill_quiz.config import AppConfig
from drill_quiz.logging_setup import setup_logging
from drill_quiz.question_bank import QuestionBankError, load_question_bank
from drill_quiz.session import QuizSession
from drill_quiz.storage import JsonFileStorage
from drill_quiz.ui import StreamlitRenderer, render_quiz_page, render_theme_selector

logger = logging.getLogger("drill_quiz.app")


# ----------------------------------------------------------------------
#  アプリ設定読み込み
# ----------------------------------------------------------------------
def load_app_config() -> AppConfig:
    if "app_config" not in st.session_state:
        st.session_state["app_config"] = AppConfig.from_toml()
    return st.session_state["app_config"]


# ----------------------------------------------------------------------
#  QuizSession のラッパー
# ----------------------------------------------------------------------
def get_quiz_session(cfg: AppConfig) -> QuizSession:
    """
    QuizSession をセッションに保持して返す。
    問題バンクが読めない場合はエラーを表示して処理を止める。
    """
    if "quiz_session" in st.session_state:
        return st.session_state["quiz_session"]

    try:
        bank = load_question_bank(cfg.question_bank_path)
    except QuestionBankError as e:
        logger.error("Cannot start session: %s", e)
        st.error(f"問題バンクの読み込みに失敗しました。{e}")
        st.stop()

    renderer = StreamlitRenderer()
    session = QuizSession(
        bank,
        JsonFileStorage(cfg.storage_dir),
        renderer,
        policy=cfg.selection_policy,
    )
    session.start()

    st.session_state["quiz_renderer"] = renderer
    st.session_state["quiz_session"] = session
    return session


def set_page(page: str) -> None:
    st.session_state["page"] = page


def get_page() -> str:
    return st.session_state.get("page", "quiz")


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz_main_page(session: QuizSession) -> None:
    renderer: StreamlitRenderer = st.session_state["quiz_renderer"]
    ui_result = render_quiz_page(session, renderer)

    if ui_result["clicked_submit"]:
        answer = session.on_answer_submitted(ui_result["selected_key"])
        if not answer.accepted:
            st.warning(answer.message())
        else:
            st.rerun()
    elif ui_result["clicked_next"]:
        session.on_advance_requested()
        st.rerun()
    elif ui_result["clicked_prev"]:
        session.on_retreat_requested()
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: 学習統計
# ----------------------------------------------------------------------
def render_stats_page(session: QuizSession) -> None:
    st.markdown("## 📊 学習統計")

    rows = session.stats.rows(session.bank)
    total_shown = sum(r["shown"] for r in rows)
    total_wrong = sum(r["wrong"] for r in rows)

    st.write(f"- 累計出題数: **{total_shown} 問**")
    st.write(f"- 累計誤答数: **{total_wrong} 問**")
    st.write(f"- このセッションで見た問題: **{len(session.history)} 問**")

    st.write("---")
    st.markdown("### 問題ごとの出題回数・誤答回数")
    st.caption("重み = (誤答回数 + 1) / (出題回数 + 1)。重みが最大の問題から次の新しい問題が選ばれます。")

    df = pd.DataFrame(rows).rename(
        columns={
            "id": "ID",
            "question": "問題",
            "shown": "出題",
            "wrong": "誤答",
            "weight": "重み",
        }
    )
    df = df.sort_values(["重み", "誤答"], ascending=False)
    st.dataframe(df, use_container_width=True, hide_index=True)


# ----------------------------------------------------------------------
#  ページ: 使い方
# ----------------------------------------------------------------------
def render_help_page() -> None:
    st.markdown("## ❓ 使い方")

    st.markdown(
        """
1. 選択肢を 1 つ選んで「送信」を押すと、その場で正誤が表示されます。
2. 「次の問題 ▶」で次へ進みます。見直し中なら、すでに見た問題へ進みます。
3. 「◀ 前の問題」で、このセッションで見た問題に戻れます。
4. 間違えた問題や、まだあまり出ていない問題ほど優先して出題されます。
5. ページを再読み込みしても、見ていた問題と統計はそのまま残ります。
        """
    )


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    cfg = load_app_config()
    setup_logging(cfg)

    st.set_page_config(
        page_title=cfg.app_name,
        page_icon="🧠",
        layout="centered",
    )

    session = get_quiz_session(cfg)

    with st.sidebar:
        st.markdown(f"### {cfg.app_name}")
        pages = {"quiz": "クイズ", "stats": "学習統計", "help": "使い方"}
        keys = list(pages)
        page = st.radio(
            "メニュー",
            keys,
            index=keys.index(get_page()) if get_page() in keys else 0,
            format_func=lambda k: pages[k],
        )
        set_page(page)
        render_theme_selector()

    if page == "stats":
        render_stats_page(session)
    elif page == "help":
        render_help_page()
    else:
        render_quiz_main_page(session)


if __name__ == "__main__":
    main()
