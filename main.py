import os
import re
import shutil
import subprocess
import sys


def run_step(command, step_name):
    print(f"\n🚀 Running Step: {step_name}...")
    try:
        process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

        # Output is kept so the channel ID can be read back from step 1
        full_output = ""
        for line in process.stdout:
            print(line, end="")
            full_output += line

        process.wait()

        if process.returncode != 0:
            print(f"❌ Error in {step_name}")
            return False, full_output

        return True, full_output
    except OSError as e:
        print(f"❌ Exception in {step_name}: {e}")
        return False, str(e)


def copy_report(source, target, label):
    if not os.path.exists(source):
        return
    try:
        shutil.copy(source, target)
        print(f"✨ Final {label} copied to: {target}")
    except OSError as e:
        print(f"⚠️ Could not copy {label} to reports/ archive: {e}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python3 main.py \"CHANNEL_OR_VIDEO_URL\"")
        sys.exit(1)

    channel_url = sys.argv[1]
    output_folder = os.getenv("OUTPUT_FOLDER", ".tmp/channel_pulse")
    python = sys.executable or "python3"

    os.makedirs("reports", exist_ok=True)

    # Step 1: Fetch feed
    success, output = run_step(
        [python, "-m", "tools.youtube_fetch_channel_feed", channel_url], "Fetching Channel Feed"
    )
    if not success:
        sys.exit(1)

    match = re.search(r"Channel ID: ([A-Za-z0-9_-]+)", output)
    if not match:
        print("❌ Could not determine Channel ID from output.")
        sys.exit(1)

    channel_id = match.group(1).strip()
    print(f"✅ Identified Channel ID: {channel_id}")

    feed_path = f"{output_folder}/{channel_id}/feed.json"
    analysis_path = f"{output_folder}/{channel_id}/analysis.json"

    # Step 2: Aggregate stats
    success, _ = run_step([python, "-m", "tools.channel_stats", feed_path], "Computing Channel Stats")
    if not success:
        sys.exit(1)

    # Step 3: Export to Excel
    success, _ = run_step(
        [python, "-m", "tools.export_to_excel", feed_path, analysis_path], "Exporting to Excel"
    )
    if not success:
        # The markdown report does not depend on the workbook
        print("⚠️ Excel export failed, proceeding to Markdown report.")

    # Step 4: Generate Markdown Report
    run_step([python, "-m", "tools.generate_markdown_report", feed_path, analysis_path], "Generating Markdown Report")

    print()
    copy_report(f"{output_folder}/{channel_id}/report.md", f"reports/{channel_id}_report.md", "report")
    copy_report(f"{output_folder}/{channel_id}/channel_pulse.xlsx", f"reports/{channel_id}_pulse.xlsx", "Excel summary")

    print("\n✅ Channel Pulse Pipeline Complete!")


if __name__ == "__main__":
    main()
