# Allow-list review page: streamlit run app.py -- --root path/to/project
import argparse
import sys

import streamlit as st

from spellgate.config import load_config
from spellgate.errors import SpellGateError
from spellgate.gate import SpellGate
from spellgate.report import suggestions, violations_frame

APP_TITLE = "spellgate - allow-list review"


def parse_args(argv):
    ap = argparse.ArgumentParser()
    ap.add_argument("--root")
    ap.add_argument("--config")
    ap.add_argument("--dictionary")
    return ap.parse_args(argv)


def load_gate(args) -> SpellGate:
    config = load_config(root=args.root, config_file=args.config, overrides={"dictionary": args.dictionary})
    return SpellGate(config)


def main():
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    st.markdown(f"# {APP_TITLE}")
    args = parse_args(sys.argv[1:])
    try:
        gate = load_gate(args)
        result = gate.check()
    except SpellGateError as exc:
        st.error(str(exc))
        st.stop()

    st.caption(f"Root: {gate.config.root} | Dictionary: {result.dictionary} | Allow-list: {gate.config.allowlist_path}")
    c1, c2, c3 = st.columns(3)
    c1.metric("Status", result.status)
    c2.metric("Documents", result.documents_checked)
    c3.metric("Unknown words", len(result.tokens))

    if result.passed:
        st.success("Every flagged word is on the allow-list.")
    else:
        hints = suggestions(result, gate.checker, gate.load_allowlist())
        st.dataframe(violations_frame(result, hints), use_container_width=True)

        st.markdown("#### Approve words")
        picked = st.multiselect(
            "Select words to add to the allow-list",
            result.tokens,
            format_func=lambda t: f"{t} ({len(result.by_token()[t])} doc)",
        )
        if st.button("Append selected to allow-list", disabled=len(picked) == 0):
            added = gate.approve(picked)
            st.success(f"Added {len(added)} word(s). Rerun to refresh.")

    st.divider()
    st.markdown("#### Maintenance")
    m1, m2 = st.columns(2)
    with m1:
        if st.button("Prune unused words"):
            removed = gate.prune()
            st.info(f"Removed {len(removed)} word(s): {', '.join(removed) or '-'}")
    with m2:
        confirm = st.checkbox("I understand regenerate overwrites the allow-list")
        if st.button("Regenerate allow-list", disabled=not confirm):
            allow = gate.regenerate()
            st.warning(f"Allow-list rewritten with {len(allow)} word(s).")


if __name__ == "__main__":
    main()
