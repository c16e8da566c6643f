"""
Writing generated segments to downloadable files.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from website_gen.models import CodeBundle, SegmentType


EXPORT_MIME_TYPE = "text/plain"


class SegmentExporter:
    """Saves bundle segments under an output directory."""

    def __init__(self, output_dir: Union[str, Path] = "outputs"):
        """
        Initialize the exporter.

        Args:
            output_dir: Directory the files are written to.
        """
        self.output_dir = Path(output_dir)

    @staticmethod
    def filename_for(segment: SegmentType) -> str:
        """Default filename for a segment."""
        return segment.default_filename

    @staticmethod
    def download_payload(
        bundle: CodeBundle,
        segment: SegmentType
    ) -> Tuple[str, str, str]:
        """
        Data for a "save as file" action.

        Returns:
            Tuple of (filename, content, mime type).
        """
        return segment.default_filename, bundle.segment(segment), EXPORT_MIME_TYPE

    def export_segment(
        self,
        bundle: CodeBundle,
        segment: SegmentType,
        filename: Optional[str] = None
    ) -> Path:
        """
        Save one segment to disk.

        Args:
            bundle: Bundle to export from.
            segment: Which segment to write.
            filename: Output filename (default: index.html, style.css or script.js).

        Returns:
            Path to saved file.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / (filename or self.filename_for(segment))
        path.write_text(bundle.segment(segment), encoding="utf-8")
        return path

    def export_bundle(self, bundle: CodeBundle) -> Dict[SegmentType, Path]:
        """Save all three segments with their default filenames."""
        return {
            segment: self.export_segment(bundle, segment)
            for segment in SegmentType
        }

    def save_metadata(self, bundle: CodeBundle, filename: str = "generation_log.json") -> Path:
        """
        Save generation metadata next to the exported files.

        Returns:
            Path to the metadata file.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        metadata_path = self.output_dir / filename
        metadata = {
            "description": bundle.description,
            "timestamp": bundle.generated_at.isoformat(),
            "model": bundle.model_name,
            "files": {segment.value: segment.default_filename for segment in SegmentType},
            "metadata": bundle.generation_metadata,
        }
        metadata_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        return metadata_path

    def load_bundle(self, **kwargs) -> CodeBundle:
        """
        Load a previously exported bundle from the output directory.

        Raises:
            FileNotFoundError: One of the three files is missing.
        """
        texts = {}
        for segment in SegmentType:
            path = self.output_dir / segment.default_filename
            if not path.exists():
                raise FileNotFoundError(f"{segment.value} file not found: {path}")
            texts[segment] = path.read_text(encoding="utf-8")

        return CodeBundle(
            markup=texts[SegmentType.MARKUP],
            style=texts[SegmentType.STYLE],
            behavior=texts[SegmentType.BEHAVIOR],
            **kwargs
        )
