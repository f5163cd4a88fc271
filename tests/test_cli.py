import json

import pytest

import count_method_chains
from count_method_chains import main, run_method_chains


@pytest.fixture
def corpus(tmp_path):
    root = tmp_path / "corpus"
    (root / "alpha" / "build").mkdir(parents=True)
    (root / "alpha" / "A.java").write_text("class A { void f() { a().b().c(); x(); } }", encoding="utf-8")
    (root / "alpha" / "build" / "G.java").write_text("g().h();", encoding="utf-8")
    (root / "beta").mkdir()
    (root / "beta" / "B.java").write_text("b(c(), d()).e();", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # empty reads as unset; setenv also restores the original values afterwards
    for key in ("PROJECT_DIR", "OUTPUT_PATH", "TRACE_PATH", "IGNORE_DIRS"):
        monkeypatch.setenv("METHOD_CHAINS_" + key, "")
    # keep .env discovery away from the developer's working tree
    monkeypatch.chdir(tmp_path)


def read_rows(path):
    return path.read_text(encoding="utf-8").splitlines()


class TestRun:
    def test_writes_csv_per_project(self, corpus, tmp_path):
        out = tmp_path / "chains.csv"
        results = run_method_chains(project_dir=corpus, output_path=out, quiet=True)
        assert [r.name for r in results] == ["alpha", "beta"]
        assert read_rows(out) == [
            "project, chain length, frequency",
            "alpha, 3, 1",
            "alpha, 2, 1",
            "alpha, 1, 1",
            "beta, 2, 1",
            "beta, 1, 2",
        ]

    def test_single_project_and_ignore(self, corpus, tmp_path):
        out = tmp_path / "one.csv"
        results = run_method_chains(
            project_dir=corpus / "alpha", output_path=out, single_project=True, ignore={"build"}, quiet=True
        )
        assert len(results) == 1
        assert read_rows(out)[1:] == ["alpha, 3, 1", "alpha, 1, 1"]

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            run_method_chains(project_dir=tmp_path / "nope", output_path=tmp_path / "o.csv", quiet=True)
        assert "Cannot read directory" in str(exc.value)

    def test_summary_and_trace(self, corpus, tmp_path):
        trace = tmp_path / "trace.jsonl"
        summary = tmp_path / "summary.json"
        run_method_chains(
            project_dir=corpus, output_path=tmp_path / "c.csv", summary_path=summary, trace_path=trace, quiet=True
        )
        data = json.loads(summary.read_text(encoding="utf-8"))
        assert [p["project"] for p in data["projects"]] == ["alpha", "beta"]
        assert data["total_chains"] == 6

        recs = [json.loads(line) for line in trace.read_text(encoding="utf-8").splitlines()]
        assert [r["stage"] for r in recs] == ["project", "project", "run_total"]
        assert [r["project"] for r in recs[:2]] == ["alpha", "beta"]
        assert recs[-1]["chains"] == 6
        assert recs[-1]["extra"]["projects"] == 2

    def test_unwritable_trace_is_fatal(self, corpus, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            run_method_chains(
                project_dir=corpus, output_path=tmp_path / "c.csv", trace_path=blocker / "t.jsonl", quiet=True
            )
        assert "Cannot create file" in str(exc.value)
        assert "t.jsonl" in str(exc.value)

    def test_unwritable_summary_is_fatal(self, corpus, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            run_method_chains(
                project_dir=corpus, output_path=tmp_path / "c.csv", summary_path=blocker / "s.json", quiet=True
            )
        assert "Cannot create file" in str(exc.value)
        assert "s.json" in str(exc.value)

    def test_progress_messages(self, corpus, tmp_path, capsys):
        run_method_chains(project_dir=corpus, output_path=tmp_path / "c.csv")
        err = capsys.readouterr().err
        assert "Found 2 project directories" in err
        assert "[1/2] processing project alpha" in err
        assert "[2/2] appending 2 items for project beta" in err
        assert "Done." in err


class TestMain:
    def test_flags(self, corpus, tmp_path):
        out = tmp_path / "flags.csv"
        main(["-p", str(corpus), "-o", str(out), "--skip-build-dirs", "-q"])
        assert read_rows(out)[1:4] == ["alpha, 3, 1", "alpha, 1, 1", "beta, 2, 1"]

    def test_env_and_dotenv(self, corpus, tmp_path):
        out = tmp_path / "env.csv"
        env_file = tmp_path / "custom.env"
        env_file.write_text(
            f"METHOD_CHAINS_PROJECT_DIR={corpus}\nMETHOD_CHAINS_OUTPUT_PATH='{out}'\nMETHOD_CHAINS_IGNORE_DIRS=build, .git\n",
            encoding="utf-8",
        )
        main(["--dotenv", str(env_file), "-q"])
        assert read_rows(out)[1:3] == ["alpha, 3, 1", "alpha, 1, 1"]

    def test_missing_arguments(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["-q"])
        assert exc.value.code == 2
        assert "--project-dir is required" in capsys.readouterr().err

    def test_parser_prog(self):
        assert count_method_chains.build_arg_parser().prog == "method-chains"
