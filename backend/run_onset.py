import argparse
import base64
import json

from dotenv import load_dotenv

from pipeline.note_detection import AnalysisConfig, detect_notes_from_base64


def main():
    parser = argparse.ArgumentParser(description="Detect timed note events in an audio file.")
    parser.add_argument("audio_path", help="Input audio file (ogg, wav, flac)")
    parser.add_argument("--out", default=None, help="Write JSON triples here instead of stdout")
    args = parser.parse_args()

    load_dotenv()
    config = AnalysisConfig.from_env()

    with open(args.audio_path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("ascii")

    notes = detect_notes_from_base64(payload, config)
    output = json.dumps([list(n) for n in notes], indent=2)

    if args.out:
        with open(args.out, "w") as f:
            f.write(output)
        print(f"Done. Wrote {len(notes)} notes to {args.out}")
    else:
        print(output)


if __name__ == "__main__":
    main()
