"""Tests for SourceMonitor command file generation."""
from dataclasses import astuple
from metrichunter.infrastructure.sourcemonitor.job_descriptor import (
    JobDescriptorBuilder,
    TemplateReplacements,
    write_text_atomic
)


def test_build_job_descriptor_substitutes_all_placeholders(path_resolver, repository, tmp_path):
    """Test no placeholder token survives rendering."""
    builder = JobDescriptorBuilder(path_resolver)

    descriptor_path = builder.build_job_descriptor(repository)

    assert descriptor_path == tmp_path / "C#" / "SourceMonitor" / "owner1" / "foo.xml"
    content = descriptor_path.read_text(encoding="utf-8")
    for token in astuple(TemplateReplacements()):
        assert token not in content
    assert "<project_language>C#</project_language>" in content
    assert str((tmp_path / "C#" / "Repositories" / "owner1" / "foo").resolve()) in content
    assert str((tmp_path / "C#" / "Reports" / "owner1").resolve()) in content


def test_build_job_descriptor_creates_report_directory(path_resolver, repository, tmp_path):
    """Test the report directory exists before SourceMonitor runs."""
    JobDescriptorBuilder(path_resolver).build_job_descriptor(repository)

    assert (tmp_path / "C#" / "Reports" / "owner1").is_dir()


def test_build_job_descriptor_skips_existing_file(path_resolver, repository):
    """Test an existing command file is reused untouched."""
    builder = JobDescriptorBuilder(path_resolver)
    descriptor_path = builder.build_job_descriptor(repository)
    descriptor_path.write_text("edited by hand", encoding="utf-8")

    assert builder.build_job_descriptor(repository) == descriptor_path
    assert descriptor_path.read_text(encoding="utf-8") == "edited by hand"


def test_custom_template_and_tokens(path_resolver, repository, tmp_path):
    """Test a custom template with custom placeholder tokens."""
    template = tmp_path / "custom.xml"
    template.write_text("<p name='%NAME%' lang='%LANG%'>%SRC%|%JOB%|%OUT%</p>", encoding="utf-8")
    replacements = TemplateReplacements(
        project_name="%NAME%",
        project_directory="%SRC%",
        project_file_directory="%JOB%",
        project_language="%LANG%",
        reports_path="%OUT%"
    )

    builder = JobDescriptorBuilder(path_resolver, template_path=template, replacements=replacements)
    content = builder.build_job_descriptor(repository).read_text(encoding="utf-8")

    assert "name='foo'" in content
    assert "lang='C#'" in content
    assert "%" not in content


def test_write_text_atomic_leaves_no_temporary_files(tmp_path):
    """Test the target is replaced and no temporary file remains."""
    target = tmp_path / "job.xml"
    target.write_text("old", encoding="utf-8")

    write_text_atomic(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert [p.name for p in tmp_path.iterdir()] == ["job.xml"]
