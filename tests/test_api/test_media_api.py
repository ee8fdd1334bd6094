import os

from conseil.services.errors import ProviderError


class TestMediaAPI:
    def test_generate_audio(self, client, mock_gateway, mock_synthesizer, media_store):
        """Test POST /generate-audio"""
        mock_gateway.complete.return_value = " Le vol est puni par la loi. "

        response = client.post("/generate-audio", json={"question": "Le vol est-il puni ?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Le vol est puni par la loi."
        assert data["filePath"].startswith("/generated/audio-")
        assert data["filePath"].endswith(".mp3")

        mock_synthesizer.synthesize_speech.assert_awaited_once_with(
            "Le vol est puni par la loi."
        )
        filename = data["filePath"].rsplit("/", 1)[1]
        with open(os.path.join(media_store.directory, filename), "rb") as f:
            assert f.read() == b"ID3-fake-mp3"

    def test_generate_audio_invalid_input(self, client, mock_gateway, mock_synthesizer):
        response = client.post("/generate-audio", json={"question": 42})

        assert response.status_code == 400
        mock_gateway.complete.assert_not_called()
        mock_synthesizer.synthesize_speech.assert_not_called()

    def test_generate_image(self, client, mock_synthesizer, media_store):
        """Test POST /generate-image"""
        response = client.post("/generate-image", json={"prompt": "un chat\nsur la lune"})

        assert response.status_code == 200
        data = response.json()
        assert data["imageUrl"].startswith("/generated/image-")
        mock_synthesizer.generate_image.assert_awaited_once_with("un chat sur la lune")

        filename = data["imageUrl"].rsplit("/", 1)[1]
        assert os.path.exists(os.path.join(media_store.directory, filename))

    def test_generate_image_accepts_question_key(self, client, mock_synthesizer):
        response = client.post("/generate-image", json={"question": "un phare"})

        assert response.status_code == 200

    def test_generate_image_distinct_files(self, client):
        first = client.post("/generate-image", json={"prompt": "un phare"})
        second = client.post("/generate-image", json={"prompt": "un phare"})

        assert first.json()["imageUrl"] != second.json()["imageUrl"]

    def test_generate_image_provider_error(self, client, mock_synthesizer, media_store):
        mock_synthesizer.generate_image.side_effect = ProviderError("content policy")

        response = client.post("/generate-image", json={"prompt": "un phare"})

        assert response.status_code == 500
        assert "content policy" not in response.text
        assert os.listdir(media_store.directory) == []
