"""
Streamlit web interface for the website generation pipeline.

Type a description, generate, inspect the HTML/CSS/JS, try the site in a
sandboxed preview, and download each file.
"""

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

from website_gen.config import PROVIDER_DEFAULTS, Settings
from website_gen.io.exporter import SegmentExporter
from website_gen.models import SegmentType
from website_gen.pipeline.generation import WebsiteGenerator
from website_gen.session import GenerationSession

# Load environment variables
load_dotenv()

# Page configuration
st.set_page_config(
    page_title="AI Website Generator",
    page_icon="🌐",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 1rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)

CODE_LANGUAGES = {
    SegmentType.MARKUP: "html",
    SegmentType.STYLE: "css",
    SegmentType.BEHAVIOR: "javascript",
}


def get_session(settings: Settings) -> GenerationSession:
    """Session for this browser tab, with a generator for the current settings."""
    if "generation_session" not in st.session_state:
        st.session_state.generation_session = GenerationSession(WebsiteGenerator(settings))
    session = st.session_state.generation_session
    if session.generator.settings != settings:
        session.generator = WebsiteGenerator(settings)
    return session


def main():
    """Main application entry point."""

    # Header
    st.markdown('<div class="main-header">🌐 AI Website Generator</div>', unsafe_allow_html=True)
    st.markdown(
        '<div class="sub-header">Describe a website and get HTML, CSS and JavaScript</div>',
        unsafe_allow_html=True
    )

    # Sidebar configuration
    with st.sidebar:
        st.header("⚙️ Configuration")

        provider = st.selectbox(
            "Provider",
            list(PROVIDER_DEFAULTS),
            index=0,
            help="Select the LLM provider for generation"
        )
        model_name = st.text_input("Model", value=PROVIDER_DEFAULTS[provider]["model"])
        temperature = st.slider(
            "Temperature",
            min_value=0.0,
            max_value=1.0,
            value=0.4,
            step=0.1,
            help="Lower = more literal instruction following"
        )
        api_key = st.text_input(
            "API Key",
            value="",
            type="password",
            help=f"Leave empty to use {PROVIDER_DEFAULTS[provider]['api_key_env']}"
        )

    settings = Settings.from_env(
        provider=provider,
        model_name=model_name,
        temperature=temperature,
        api_key=api_key or None,
    )
    session = get_session(settings)

    description = st.text_area(
        "Website description",
        placeholder="e.g. a counter button with increment and reset",
        height=120
    )

    if st.button("🚀 Generate Website", type="primary", disabled=session.busy):
        with st.spinner("🔄 Generating website..."):
            outcome = session.run(description)

        if outcome.ok:
            st.success(f"✅ {outcome.message}")
        elif outcome.error_kind in ("missing_input", "missing_credential"):
            st.warning(f"⚠️ {outcome.message}")
        else:
            st.error(f"❌ {outcome.message}")

    if session.bundle is None:
        st.info("👆 Describe a website and press Generate.")
        return

    st.divider()
    results_section(session)


def results_section(session: GenerationSession):
    """Code tabs, preview and downloads for the current bundle."""
    bundle = session.bundle

    code_col, preview_col = st.columns(2)

    with code_col:
        st.subheader("💻 Generated Code")
        tabs = st.tabs([segment.default_filename for segment in SegmentType])
        for tab, segment in zip(tabs, SegmentType):
            with tab:
                st.code(bundle.segment(segment), language=CODE_LANGUAGES[segment], line_numbers=True)

        download_cols = st.columns(3)
        for col, segment in zip(download_cols, SegmentType):
            filename, data, mime = SegmentExporter.download_payload(bundle, segment)
            with col:
                st.download_button(
                    label=f"⬇️ {filename}",
                    data=data,
                    file_name=filename,
                    mime=mime,
                    key=f"download_{segment.value}"
                )

    with preview_col:
        st.subheader("🖥️ Live Preview")
        # Rendered inside Streamlit's sandboxed iframe
        components.html(session.preview.html, height=600, scrolling=True)
        st.caption(f"Model: {bundle.model_name} | {bundle.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")


if __name__ == "__main__":
    main()
